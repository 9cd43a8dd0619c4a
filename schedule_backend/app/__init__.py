"""FastAPI application package."""

from __future__ import annotations


def get_app():
    """Return the FastAPI application without importing it eagerly.

    Alembic imports the models through this package and must not pull in the
    routers or trigger startup configuration.
    """

    from .main import app

    return app


__all__ = ["get_app"]
