"""add user activity log

Revision ID: 0003
Revises: 0002
Create Date: 2025-02-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_activity_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("action_type", sa.String(20), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=True),
        sa.Column("resource_id", sa.String(100), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "action_type IN ('login', 'logout', 'create', 'update', 'delete', 'view', 'export')",
            name="ck_user_activity_logs_action_type",
        ),
    )

    op.create_index("idx_activity_logs_created_at", "user_activity_logs", ["created_at"])
    op.create_index("idx_activity_logs_username", "user_activity_logs", ["username"])
    op.create_index("idx_activity_logs_action_type", "user_activity_logs", ["action_type"])


def downgrade() -> None:
    op.drop_index("idx_activity_logs_action_type", table_name="user_activity_logs")
    op.drop_index("idx_activity_logs_username", table_name="user_activity_logs")
    op.drop_index("idx_activity_logs_created_at", table_name="user_activity_logs")
    op.drop_table("user_activity_logs")
