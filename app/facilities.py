"""Businesses and road lamps along the road network."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.errors import DuplicateName, ValidationError
from app.models import Address, Business, Road, RoadLamp, SubRoad, utcnow
from app.records import get_active, has_active, is_active, nullable_match, require, save, soft_delete
from app.schemas import BusinessIn, BusinessListItem, BusinessOut, RoadLampIn, RoadLampListItem, RoadLampOut

LAMP_STATUSES = ("working", "broken")


# ── Businesses ───────────────────────────────────────────────────────────────

async def list_businesses(db: AsyncSession) -> list[BusinessListItem]:
    sub_road = aliased(SubRoad)
    stmt = (
        select(Business, Road.name, sub_road.name)
        .outerjoin(Road, Road.id == Business.road_id)
        .outerjoin(sub_road, sub_road.id == Business.sub_road_id)
        .where(is_active(Business))
        .order_by(Business.business_name)
    )
    rows = await db.execute(stmt)
    return [
        BusinessListItem(
            **BusinessOut.model_validate(business).model_dump(),
            road_name=road_name,
            sub_road_name=sub_road_name,
            address=business.business_address,
        )
        for business, road_name, sub_road_name in rows.all()
    ]


async def _ensure_unique_business(db: AsyncSession, data: BusinessIn, exclude_id: int | None = None) -> None:
    conditions = [
        Business.business_name == data.business_name.strip(),
        Business.road_id == data.road_id,
        nullable_match(Business.sub_road_id, data.sub_road_id),
        nullable_match(Business.business_address, data.business_address or None),
    ]
    if exclude_id is not None:
        conditions.append(Business.id != exclude_id)
    if await has_active(db, Business, *conditions):
        raise DuplicateName("Business name already exists at this location")


def _check_business(data: BusinessIn) -> None:
    require(
        "Missing required fields: business_name, business_owner, business_type, and road_id are required",
        data.business_name,
        data.business_owner,
        data.business_type,
        data.road_id,
    )


def _apply_business(business: Business, data: BusinessIn) -> None:
    business.business_name = data.business_name.strip()
    business.business_owner = data.business_owner.strip()
    business.business_type = data.business_type
    business.business_address = data.business_address or None
    business.business_phone = data.business_phone or None
    business.road_id = data.road_id
    business.sub_road_id = data.sub_road_id or None


async def create_business(db: AsyncSession, data: BusinessIn) -> Business:
    _check_business(data)
    await _ensure_unique_business(db, data)

    business = Business()
    _apply_business(business, data)
    return await save(db, business, "Business name already exists at this location")


async def update_business(db: AsyncSession, business_id: int, data: BusinessIn) -> Business:
    _check_business(data)
    await _ensure_unique_business(db, data, exclude_id=business_id)

    business = await get_active(db, Business, business_id, "Business")
    _apply_business(business, data)
    business.updated_at = utcnow()
    return await save(db, business, "Business name already exists at this location")


async def delete_business(db: AsyncSession, business_id: int) -> None:
    await soft_delete(db, Business, business_id, "Business", touch=True)


# ── Road lamps ───────────────────────────────────────────────────────────────

async def list_road_lamps(db: AsyncSession) -> list[RoadLampListItem]:
    sub_road = aliased(SubRoad)
    stmt = (
        select(RoadLamp, Road.name, sub_road.name, Address.address)
        .outerjoin(Road, Road.id == RoadLamp.road_id)
        .outerjoin(sub_road, sub_road.id == RoadLamp.sub_road_id)
        .outerjoin(Address, Address.id == RoadLamp.address_id)
        .where(is_active(RoadLamp))
        .order_by(RoadLamp.lamp_number)
    )
    rows = await db.execute(stmt)
    return [
        RoadLampListItem(
            **RoadLampOut.model_validate(lamp).model_dump(),
            road_name=road_name,
            sub_road_name=sub_road_name,
            address=address,
        )
        for lamp, road_name, sub_road_name, address in rows.all()
    ]


async def create_road_lamp(db: AsyncSession, data: RoadLampIn) -> RoadLamp:
    require("Missing required fields", data.lamp_number, data.road_id, data.sub_road_id, data.address_id)
    lamp_number = data.lamp_number.strip()

    if await has_active(db, RoadLamp, RoadLamp.lamp_number == lamp_number):
        raise DuplicateName("Lamp number already exists")

    lamp = RoadLamp(
        lamp_number=lamp_number,
        road_id=data.road_id,
        sub_road_id=data.sub_road_id,
        address_id=data.address_id,
        status=data.status or "working",
    )
    return await save(db, lamp, "Lamp number already exists")


async def update_road_lamp(db: AsyncSession, lamp_id: int, data: RoadLampIn) -> RoadLamp:
    require("Missing required fields", data.lamp_number, data.road_id, data.sub_road_id, data.address_id)
    lamp_number = data.lamp_number.strip()

    if await has_active(db, RoadLamp, RoadLamp.lamp_number == lamp_number, RoadLamp.id != lamp_id):
        raise DuplicateName("Lamp number already exists")

    lamp = await get_active(db, RoadLamp, lamp_id, "Road lamp")
    lamp.lamp_number = lamp_number
    lamp.road_id = data.road_id
    lamp.sub_road_id = data.sub_road_id
    lamp.address_id = data.address_id
    lamp.status = data.status or "working"
    lamp.updated_at = utcnow()
    return await save(db, lamp, "Lamp number already exists")


async def set_lamp_status(db: AsyncSession, lamp_id: int, status: str | None) -> RoadLamp:
    if status not in LAMP_STATUSES:
        raise ValidationError("Invalid status value")

    lamp = await get_active(db, RoadLamp, lamp_id, "Road lamp")
    lamp.status = status
    lamp.updated_at = utcnow()
    return await save(db, lamp, "Lamp number already exists")


async def delete_road_lamp(db: AsyncSession, lamp_id: int) -> None:
    await soft_delete(db, RoadLamp, lamp_id, "Road lamp", touch=True)
