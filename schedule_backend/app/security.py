"""Verification of identity-provider bearer tokens.

Sign-in and sign-up happen at the identity provider. This module only checks
the HS256 tokens it issues and exposes the user id (``sub`` claim) that scopes
every schedule collection.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

JWT_SECRET_ENV = "SCHEDULE_JWT_SECRET"
JWT_AUDIENCE_ENV = "SCHEDULE_JWT_AUDIENCE"
ACCESS_TOKEN_EXPIRE_MINUTES_ENV = "ACCESS_TOKEN_EXPIRE_MINUTES"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


class SecurityConfigurationError(RuntimeError):
    """Raised when mandatory security settings are missing or invalid."""


@dataclass
class UserIdentity:
    """The signed-in coach as asserted by the identity provider."""

    user_id: str


def _unauthorized(detail: str = "Invalid token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@lru_cache(maxsize=1)
def _load_jwt_key() -> bytes:
    raw_secret = os.getenv(JWT_SECRET_ENV)
    if not raw_secret:
        raise SecurityConfigurationError(f"Environment variable '{JWT_SECRET_ENV}' is required")
    try:
        return base64.urlsafe_b64decode(raw_secret)
    except (ValueError, binascii.Error):
        return raw_secret.encode("utf-8")


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(signing_input: bytes, key: bytes) -> bytes:
    return hmac.new(key, signing_input, hashlib.sha256).digest()


def encode_token(payload: dict[str, Any], key: bytes) -> str:
    header = {"typ": "JWT", "alg": "HS256"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    return f"{header_b64}.{payload_b64}.{_b64url_encode(_sign(signing_input, key))}"


def decode_token(token: str, key: bytes, *, audience: Optional[str] = None) -> dict[str, Any]:
    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
        signature = _b64url_decode(signature_b64)
        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    except (ValueError, binascii.Error) as exc:
        raise _unauthorized() from exc

    if not hmac.compare_digest(signature, _sign(signing_input, key)):
        raise _unauthorized()

    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, binascii.Error) as exc:
        raise _unauthorized() from exc
    if not isinstance(payload, dict) or payload.get("exp") is None:
        raise _unauthorized()
    try:
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise _unauthorized() from exc
    if datetime.now(timezone.utc) >= expires_at:
        raise _unauthorized("Token expired")
    if audience and payload.get("aud") != audience:
        raise _unauthorized()
    return payload


def _resolve_access_token_expiry() -> timedelta:
    raw = os.getenv(ACCESS_TOKEN_EXPIRE_MINUTES_ENV)
    if not raw:
        return timedelta(minutes=60)
    try:
        minutes = int(raw)
    except ValueError as exc:
        raise SecurityConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be an integer") from exc
    if minutes <= 0:
        raise SecurityConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
    return timedelta(minutes=minutes)


def create_access_token(user_id: str, *, expires_in: Optional[timedelta] = None) -> str:
    """Issue a token the way the identity provider does, for provisioning and tests."""

    expiry = datetime.now(timezone.utc) + (expires_in or _resolve_access_token_expiry())
    payload: dict[str, Any] = {"sub": user_id, "exp": int(expiry.timestamp())}
    audience = os.getenv(JWT_AUDIENCE_ENV)
    if audience:
        payload["aud"] = audience
    return encode_token(payload, _load_jwt_key())


def get_optional_user(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[UserIdentity]:
    """Return the caller's identity, or ``None`` for anonymous requests."""

    if not token:
        return None
    payload = decode_token(token, _load_jwt_key(), audience=os.getenv(JWT_AUDIENCE_ENV))
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id.strip():
        raise _unauthorized()
    return UserIdentity(user_id=user_id)


def require_user(identity: Optional[UserIdentity] = Depends(get_optional_user)) -> UserIdentity:
    """FastAPI dependency that rejects anonymous requests."""

    if identity is None:
        raise _unauthorized("Not authenticated")
    return identity
