"""Create the per-user schedule document table."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001_schedule_documents"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "schedule_documents",
        sa.Column(
            "document_id",
            sa.CHAR(36).with_variant(postgresql.UUID(as_uuid=True), "postgresql"),
            primary_key=True,
        ),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("collection", sa.String(64), nullable=False),
        sa.Column("document_key", sa.String(128), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "owner_id",
            "collection",
            "document_key",
            name="schedule_documents_owner_collection_key",
        ),
    )
    op.create_index(
        "schedule_documents_owner_collection_idx",
        "schedule_documents",
        ["owner_id", "collection"],
    )


def downgrade() -> None:
    op.drop_index("schedule_documents_owner_collection_idx", table_name="schedule_documents")
    op.drop_table("schedule_documents")
