"""add road-development cost columns

Revision ID: 0002
Revises: 0001
Create Date: 2025-01-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("sub_sub_roads", sa.Column("width", sa.Numeric(8, 2), server_default="25", nullable=True))
    op.add_column("sub_sub_roads", sa.Column("height", sa.Numeric(8, 2), server_default="10", nullable=True))
    op.add_column("sub_sub_roads", sa.Column("square_feet", sa.Numeric(10, 2), server_default="250", nullable=True))
    op.add_column(
        "sub_sub_roads", sa.Column("cost_per_sq_ft", sa.Numeric(10, 2), server_default="400", nullable=True)
    )
    op.add_column(
        "sub_sub_roads", sa.Column("total_cost", sa.Numeric(15, 2), server_default="100000", nullable=True)
    )
    op.add_column(
        "sub_sub_roads",
        sa.Column("development_status", sa.String(20), server_default="undeveloped", nullable=False),
    )
    op.create_check_constraint(
        "ck_sub_sub_roads_development_status",
        "sub_sub_roads",
        "development_status IN ('undeveloped', 'in_progress', 'developed')",
    )

    # Projects laid directly on a main road have no parent sub-road
    op.alter_column("sub_sub_roads", "parent_sub_road_id", existing_type=sa.Integer, nullable=True)


def downgrade() -> None:
    op.alter_column("sub_sub_roads", "parent_sub_road_id", existing_type=sa.Integer, nullable=False)
    op.drop_constraint("ck_sub_sub_roads_development_status", "sub_sub_roads", type_="check")
    op.drop_column("sub_sub_roads", "development_status")
    op.drop_column("sub_sub_roads", "total_cost")
    op.drop_column("sub_sub_roads", "cost_per_sq_ft")
    op.drop_column("sub_sub_roads", "square_feet")
    op.drop_column("sub_sub_roads", "height")
    op.drop_column("sub_sub_roads", "width")
