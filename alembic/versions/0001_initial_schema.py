"""initial registry schema

Revision ID: 0001
Revises:
Create Date: 2025-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, updated: bool = False) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    columns.append(sa.Column("is_deleted", sa.Boolean, server_default=sa.false(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "roads",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "sub_roads",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("road_id", sa.Integer, sa.ForeignKey("roads.id"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "sub_sub_roads",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("road_id", sa.Integer, sa.ForeignKey("roads.id"), nullable=False),
        sa.Column("parent_sub_road_id", sa.Integer, sa.ForeignKey("sub_roads.id"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("road_id", sa.Integer, sa.ForeignKey("roads.id"), nullable=False),
        sa.Column("sub_road_id", sa.Integer, sa.ForeignKey("sub_roads.id"), nullable=True),
        sa.Column("member", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "households",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("address_id", sa.Integer, sa.ForeignKey("addresses.id"), nullable=False),
        sa.Column("assessment_number", sa.String(100), nullable=True),
        sa.Column("resident_type", sa.String(20), nullable=False),
        sa.Column("waste_disposal", sa.String(20), nullable=False),
        *_timestamps(updated=True),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("household_id", sa.Integer, sa.ForeignKey("households.id"), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("name_with_initial", sa.String(255), nullable=False),
        sa.Column("member_type", sa.String(20), server_default="permanent", nullable=False),
        sa.Column("nic", sa.String(20), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("occupation", sa.String(100), nullable=False),
        sa.Column("workplace", sa.String(255), nullable=True),
        sa.Column("school_name", sa.String(255), nullable=True),
        sa.Column("grade", sa.Integer, nullable=True),
        sa.Column("university_name", sa.String(255), nullable=True),
        sa.Column("other_occupation", sa.String(255), nullable=True),
        sa.Column("offers_receiving", sa.JSON, nullable=True),
        sa.Column("is_disabled", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("land_house_status", sa.String(30), nullable=True),
        sa.Column("whatsapp_number", sa.String(20), nullable=True),
        sa.Column("is_drug_user", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("is_thief", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("mahapola", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("aswasuma", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("wadihiti_dimana", sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(updated=True),
        sa.CheckConstraint("age IS NULL OR (age >= 0 AND age <= 150)", name="ck_members_age_range"),
    )

    op.create_table(
        "businesses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("business_owner", sa.String(255), nullable=False),
        sa.Column("business_type", sa.String(100), nullable=False),
        sa.Column("business_address", sa.String(500), nullable=True),
        sa.Column("business_phone", sa.String(20), nullable=True),
        sa.Column("road_id", sa.Integer, sa.ForeignKey("roads.id"), nullable=False),
        sa.Column("sub_road_id", sa.Integer, sa.ForeignKey("sub_roads.id"), nullable=True),
        *_timestamps(updated=True),
    )

    op.create_table(
        "road_lamps",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("lamp_number", sa.String(50), nullable=False),
        sa.Column("road_id", sa.Integer, sa.ForeignKey("roads.id"), nullable=False),
        sa.Column("sub_road_id", sa.Integer, sa.ForeignKey("sub_roads.id"), nullable=False),
        sa.Column("address_id", sa.Integer, sa.ForeignKey("addresses.id"), nullable=False),
        sa.Column("status", sa.String(20), server_default="working", nullable=False),
        *_timestamps(updated=True),
    )

    op.create_index("idx_sub_roads_road", "sub_roads", ["road_id"])
    op.create_index("idx_addresses_road_sub_road", "addresses", ["road_id", "sub_road_id"])
    op.create_index("idx_members_household", "members", ["household_id"])
    op.create_index("idx_road_lamps_road", "road_lamps", ["road_id"])

    # Natural keys are unique among rows that are not soft-deleted
    active = sa.text("NOT is_deleted")
    op.create_index("uq_roads_name_active", "roads", ["name"], unique=True, postgresql_where=active)
    op.create_index(
        "uq_sub_roads_road_name_active", "sub_roads", ["road_id", "name"], unique=True, postgresql_where=active
    )
    op.create_index(
        "uq_sub_sub_roads_parent_name_active",
        "sub_sub_roads",
        ["parent_sub_road_id", "name"],
        unique=True,
        postgresql_where=active,
    )
    op.create_index("uq_members_nic_active", "members", ["nic"], unique=True, postgresql_where=active)
    op.create_index(
        "uq_road_lamps_number_active", "road_lamps", ["lamp_number"], unique=True, postgresql_where=active
    )


def downgrade() -> None:
    op.drop_index("uq_road_lamps_number_active", table_name="road_lamps")
    op.drop_index("uq_members_nic_active", table_name="members")
    op.drop_index("uq_sub_sub_roads_parent_name_active", table_name="sub_sub_roads")
    op.drop_index("uq_sub_roads_road_name_active", table_name="sub_roads")
    op.drop_index("uq_roads_name_active", table_name="roads")
    op.drop_index("idx_road_lamps_road", table_name="road_lamps")
    op.drop_index("idx_members_household", table_name="members")
    op.drop_index("idx_addresses_road_sub_road", table_name="addresses")
    op.drop_index("idx_sub_roads_road", table_name="sub_roads")
    op.drop_table("road_lamps")
    op.drop_table("businesses")
    op.drop_table("members")
    op.drop_table("households")
    op.drop_table("addresses")
    op.drop_table("sub_sub_roads")
    op.drop_table("sub_roads")
    op.drop_table("roads")
