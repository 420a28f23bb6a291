from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def active_unique(name: str, *columns: str) -> Index:
    """Unique index that only covers rows which are not soft-deleted."""
    return Index(
        name,
        *columns,
        unique=True,
        postgresql_where=text("NOT is_deleted"),
        sqlite_where=text("NOT is_deleted"),
    )


class Road(Base):
    __tablename__ = "roads"
    __table_args__ = (active_unique("uq_roads_name_active", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class SubRoad(Base):
    __tablename__ = "sub_roads"
    __table_args__ = (
        active_unique("uq_sub_roads_road_name_active", "road_id", "name"),
        Index("idx_sub_roads_road", "road_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    road_id: Mapped[int] = mapped_column(Integer, ForeignKey("roads.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class SubSubRoad(Base):
    """A lane under a sub-road, tracked as a road-development project."""

    __tablename__ = "sub_sub_roads"
    __table_args__ = (
        active_unique("uq_sub_sub_roads_parent_name_active", "parent_sub_road_id", "name"),
        CheckConstraint(
            "development_status IN ('undeveloped', 'in_progress', 'developed')",
            name="ck_sub_sub_roads_development_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    road_id: Mapped[int] = mapped_column(Integer, ForeignKey("roads.id"), nullable=False)
    # NULL for projects laid directly on a main road
    parent_sub_road_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sub_roads.id"))
    width: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), default=25.0)
    height: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), default=10.0)
    square_feet: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=250.0)
    cost_per_sq_ft: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=400.0)
    total_cost: Mapped[float] = mapped_column(Numeric(15, 2, asdecimal=False), default=100000.0)
    development_status: Mapped[str] = mapped_column(String(20), default="undeveloped", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Address(Base):
    __tablename__ = "addresses"
    __table_args__ = (Index("idx_addresses_road_sub_road", "road_id", "sub_road_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    road_id: Mapped[int] = mapped_column(Integer, ForeignKey("roads.id"), nullable=False)
    # NULL means the address sits directly on the main road
    sub_road_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sub_roads.id"))
    member: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Household(Base):
    __tablename__ = "households"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    address_id: Mapped[int] = mapped_column(Integer, ForeignKey("addresses.id"), nullable=False)
    assessment_number: Mapped[str | None] = mapped_column(String(100))
    resident_type: Mapped[str] = mapped_column(String(20), nullable=False)
    waste_disposal: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    members: Mapped[list["Member"]] = relationship("Member", back_populates="household", lazy="raise")


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        active_unique("uq_members_nic_active", "nic"),
        Index("idx_members_household", "household_id"),
        CheckConstraint("age IS NULL OR (age >= 0 AND age <= 150)", name="ck_members_age_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    household_id: Mapped[int] = mapped_column(Integer, ForeignKey("households.id"), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_with_initial: Mapped[str] = mapped_column(String(255), nullable=False)
    member_type: Mapped[str] = mapped_column(String(20), default="permanent", nullable=False)
    nic: Mapped[str] = mapped_column(String(20), nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer)
    occupation: Mapped[str] = mapped_column(String(100), nullable=False)
    workplace: Mapped[str | None] = mapped_column(String(255))
    school_name: Mapped[str | None] = mapped_column(String(255))
    grade: Mapped[int | None] = mapped_column(Integer)
    university_name: Mapped[str | None] = mapped_column(String(255))
    other_occupation: Mapped[str | None] = mapped_column(String(255))
    offers_receiving: Mapped[list[str]] = mapped_column(JSON, default=list)
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    land_house_status: Mapped[str | None] = mapped_column(String(30))
    whatsapp_number: Mapped[str | None] = mapped_column(String(20))
    is_drug_user: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_thief: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    mahapola: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    aswasuma: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    wadihiti_dimana: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    household: Mapped["Household"] = relationship("Household", back_populates="members", lazy="raise")


class Business(Base):
    __tablename__ = "businesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_owner: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[str] = mapped_column(String(100), nullable=False)
    business_address: Mapped[str | None] = mapped_column(String(500))
    business_phone: Mapped[str | None] = mapped_column(String(20))
    road_id: Mapped[int] = mapped_column(Integer, ForeignKey("roads.id"), nullable=False)
    sub_road_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sub_roads.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class RoadLamp(Base):
    __tablename__ = "road_lamps"
    __table_args__ = (
        active_unique("uq_road_lamps_number_active", "lamp_number"),
        Index("idx_road_lamps_road", "road_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lamp_number: Mapped[str] = mapped_column(String(50), nullable=False)
    road_id: Mapped[int] = mapped_column(Integer, ForeignKey("roads.id"), nullable=False)
    sub_road_id: Mapped[int] = mapped_column(Integer, ForeignKey("sub_roads.id"), nullable=False)
    address_id: Mapped[int] = mapped_column(Integer, ForeignKey("addresses.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="working", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ActivityLog(Base):
    """Append-only audit entry. Rows are never updated or deleted."""

    __tablename__ = "user_activity_logs"
    __table_args__ = (
        Index("idx_activity_logs_created_at", "created_at"),
        Index("idx_activity_logs_username", "username"),
        Index("idx_activity_logs_action_type", "action_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    action_type: Mapped[str] = mapped_column(String(20), nullable=False)
    resource_type: Mapped[str | None] = mapped_column(String(50))
    resource_id: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    ip_address: Mapped[str | None] = mapped_column(String(45))
    user_agent: Mapped[str | None] = mapped_column(Text)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
