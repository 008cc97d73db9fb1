# alembic/versions/001_admin_integrity.py
"""Admin integrity - blocked dates and audit logs

Revision ID: 001_admin_integrity
Revises:
Create Date: 2025-01-06 00:00:00.000000

Creates the blocked_dates calendar store (one row per unavailable day) and the
append-only audit_logs table.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_admin_integrity"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create blocked_dates and audit_logs."""
    bind = op.get_bind()
    is_postgres = bind.dialect.name == "postgresql"
    json_type = postgresql.JSONB(astext_type=sa.Text()) if is_postgres else sa.JSON()

    print("Creating blocked_dates table...")
    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date", name="uq_blocked_dates_date"),
        comment="Calendar days customers cannot book",
    )
    op.create_index("ix_blocked_dates_date", "blocked_dates", ["date"])

    print("Creating audit_logs table...")
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("table_name", sa.String(80), nullable=False),
        sa.Column("entity_type", sa.String(80), nullable=False),
        sa.Column("affected_entity_id", sa.String(64), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("old_values", json_type, nullable=False),
        sa.Column("new_values", json_type, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        comment="Append-only field-level diffs of admin mutations",
    )
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id", "created_at"])
    op.create_index("ix_audit_logs_table_name", "audit_logs", ["table_name", "created_at"])

    print("Admin integrity tables created successfully!")


def downgrade() -> None:
    """Drop admin integrity tables."""
    op.drop_index("ix_audit_logs_table_name", table_name="audit_logs")
    op.drop_index("ix_audit_logs_user_id", table_name="audit_logs")
    op.drop_index("ix_audit_logs_created_at", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_blocked_dates_date", table_name="blocked_dates")
    op.drop_table("blocked_dates")
