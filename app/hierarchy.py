"""
Location hierarchy rules: Road → SubRoad → SubSubRoad / Address.

Names are unique among active rows within their parent; addresses are unique
per (address, road, sub-road) where a NULL sub-road is a main-road address.
A road can only be deleted once nothing active hangs off it.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.development import apply_dimensions
from app.errors import DependencyConflict, DuplicateName
from app.models import Address, Household, Road, RoadLamp, SubRoad, SubSubRoad
from app.records import get_active, has_active, is_active, nullable_match, require, save, soft_delete
from app.schemas import AddressIn, MainRoadAddressIn, RoadIn, SubRoadIn, SubSubRoadIn

logger = logging.getLogger(__name__)


# ── Roads ────────────────────────────────────────────────────────────────────

async def list_roads(db: AsyncSession) -> list[Road]:
    rows = await db.execute(select(Road).where(is_active(Road)).order_by(Road.name))
    return list(rows.scalars().all())


async def create_road(db: AsyncSession, data: RoadIn) -> Road:
    require("Road name is required", data.name)
    name = data.name.strip()
    message = f'A road named "{name}" already exists. Please choose a different name.'

    if await has_active(db, Road, Road.name == name):
        raise DuplicateName(message)

    return await save(db, Road(name=name), message)


async def update_road(db: AsyncSession, road_id: int, data: RoadIn) -> Road:
    require("Road name is required", data.name)
    name = data.name.strip()

    if await has_active(db, Road, Road.name == name, Road.id != road_id):
        raise DuplicateName("Road name already exists")

    road = await get_active(db, Road, road_id, "Road")
    road.name = name
    return await save(db, road, "Road name already exists")


async def road_dependencies(db: AsyncSession, road_id: int) -> tuple[bool, bool, bool]:
    """Whether the road has active sub-roads, lamps and households.

    The three probes are evaluated together in a single statement.
    """
    sub_roads = select(SubRoad.id).where(SubRoad.road_id == road_id, is_active(SubRoad)).exists()
    lamps = select(RoadLamp.id).where(RoadLamp.road_id == road_id, is_active(RoadLamp)).exists()
    households = (
        select(Household.id)
        .join(Address, Address.id == Household.address_id)
        .where(Address.road_id == road_id, is_active(Household))
        .exists()
    )
    row = (await db.execute(select(sub_roads, lamps, households))).one()
    return bool(row[0]), bool(row[1]), bool(row[2])


async def delete_road(db: AsyncSession, road_id: int) -> None:
    has_sub_roads, has_lamps, has_households = await road_dependencies(db, road_id)

    if has_sub_roads:
        raise DependencyConflict(
            "Cannot delete road. It has associated sub-roads. Please delete them first."
        )
    if has_lamps:
        raise DependencyConflict(
            "Cannot delete road. It has associated road lamps. Please delete them first."
        )
    if has_households:
        raise DependencyConflict(
            "Cannot delete road. It has associated households. Please delete them first."
        )

    await soft_delete(db, Road, road_id, "Road")
    logger.info("Road %s soft-deleted", road_id)


# ── Sub-roads ────────────────────────────────────────────────────────────────

async def list_sub_roads(db: AsyncSession, road_id: int | None = None) -> list[SubRoad]:
    stmt = select(SubRoad).where(is_active(SubRoad))
    if road_id is not None:
        stmt = stmt.where(SubRoad.road_id == road_id)
    rows = await db.execute(stmt.order_by(SubRoad.name))
    return list(rows.scalars().all())


async def create_sub_road(db: AsyncSession, data: SubRoadIn) -> SubRoad:
    require("Missing required fields", data.name, data.road_id)
    name = data.name.strip()
    message = "Sub-road name already exists for this road"

    if await has_active(db, SubRoad, SubRoad.name == name, SubRoad.road_id == data.road_id):
        raise DuplicateName(message)

    return await save(db, SubRoad(name=name, road_id=data.road_id), message)


async def update_sub_road(db: AsyncSession, sub_road_id: int, data: SubRoadIn) -> SubRoad:
    require("Missing required fields", data.name, data.road_id)
    name = data.name.strip()
    message = "Sub-road name already exists for this road"

    if await has_active(
        db,
        SubRoad,
        SubRoad.name == name,
        SubRoad.road_id == data.road_id,
        SubRoad.id != sub_road_id,
    ):
        raise DuplicateName(message)

    sub_road = await get_active(db, SubRoad, sub_road_id, "Sub-road")
    sub_road.name = name
    sub_road.road_id = data.road_id
    return await save(db, sub_road, message)


async def delete_sub_road(db: AsyncSession, sub_road_id: int) -> None:
    await soft_delete(db, SubRoad, sub_road_id, "Sub-road")


# ── Sub-sub-roads ────────────────────────────────────────────────────────────

async def list_sub_sub_roads(db: AsyncSession) -> list[SubSubRoad]:
    rows = await db.execute(select(SubSubRoad).where(is_active(SubSubRoad)).order_by(SubSubRoad.name))
    return list(rows.scalars().all())


async def create_sub_sub_road(db: AsyncSession, data: SubSubRoadIn) -> SubSubRoad:
    require("Missing required fields", data.name, data.road_id, data.parent_sub_road_id)
    name = data.name.strip()
    message = "Sub-sub-road name already exists for this sub-road"

    if await has_active(
        db,
        SubSubRoad,
        SubSubRoad.name == name,
        SubSubRoad.parent_sub_road_id == data.parent_sub_road_id,
    ):
        raise DuplicateName(message)

    project = SubSubRoad(
        name=name,
        road_id=data.road_id,
        parent_sub_road_id=data.parent_sub_road_id,
        development_status=data.development_status or "undeveloped",
    )
    apply_dimensions(project, data.width, data.height, data.cost_per_sq_ft)
    return await save(db, project, message)


async def update_sub_sub_road(db: AsyncSession, sub_sub_road_id: int, data: SubSubRoadIn) -> SubSubRoad:
    require("Missing required fields", data.name, data.road_id, data.parent_sub_road_id)
    name = data.name.strip()
    message = "Sub-sub-road name already exists for this sub-road"

    if await has_active(
        db,
        SubSubRoad,
        SubSubRoad.name == name,
        SubSubRoad.parent_sub_road_id == data.parent_sub_road_id,
        SubSubRoad.id != sub_sub_road_id,
    ):
        raise DuplicateName(message)

    project = await get_active(db, SubSubRoad, sub_sub_road_id, "Sub-sub-road")
    project.name = name
    project.road_id = data.road_id
    project.parent_sub_road_id = data.parent_sub_road_id
    project.development_status = data.development_status or "undeveloped"
    apply_dimensions(project, data.width, data.height, data.cost_per_sq_ft)
    return await save(db, project, message)


async def delete_sub_sub_road(db: AsyncSession, sub_sub_road_id: int) -> None:
    await soft_delete(db, SubSubRoad, sub_sub_road_id, "Sub-sub-road")


# ── Addresses ────────────────────────────────────────────────────────────────

async def list_addresses(
    db: AsyncSession,
    road_id: int | None = None,
    sub_road_id: int | None = None,
) -> list[Address]:
    """Active addresses.

    With a road but no sub-road only the main-road addresses
    (``sub_road_id IS NULL``) are returned, never every address on the road.
    """
    stmt = select(Address).where(is_active(Address))
    if road_id is not None:
        stmt = stmt.where(Address.road_id == road_id, nullable_match(Address.sub_road_id, sub_road_id))
    rows = await db.execute(stmt.order_by(Address.address))
    return list(rows.scalars().all())


async def _ensure_unique_address(
    db: AsyncSession,
    address: str,
    road_id: int,
    sub_road_id: int | None,
    exclude_id: int | None = None,
    message: str = "Address already exists for this location",
) -> None:
    conditions = [
        Address.address == address,
        Address.road_id == road_id,
        nullable_match(Address.sub_road_id, sub_road_id),
    ]
    if exclude_id is not None:
        conditions.append(Address.id != exclude_id)
    if await has_active(db, Address, *conditions):
        raise DuplicateName(message)


async def create_address(db: AsyncSession, data: AddressIn) -> Address:
    require("Address and road_id are required", data.address, data.road_id)
    address = data.address.strip()

    await _ensure_unique_address(db, address, data.road_id, data.sub_road_id)

    record = Address(
        address=address,
        road_id=data.road_id,
        sub_road_id=data.sub_road_id,
        member=data.member or None,
    )
    return await save(db, record, "Address already exists for this location")


async def create_main_road_address(db: AsyncSession, road_id: int, data: MainRoadAddressIn) -> Address:
    require("Address is required", data.address)
    address = data.address.strip()
    message = "Address already exists for this main road"

    await _ensure_unique_address(db, address, road_id, None, message=message)

    record = Address(address=address, road_id=road_id, sub_road_id=None, member=data.member or None)
    return await save(db, record, message)


async def update_address(db: AsyncSession, address_id: int, data: AddressIn) -> Address:
    require("Missing required fields", data.address, data.road_id)
    address = data.address.strip()

    await _ensure_unique_address(db, address, data.road_id, data.sub_road_id, exclude_id=address_id)

    record = await get_active(db, Address, address_id, "Address")
    record.address = address
    record.road_id = data.road_id
    record.sub_road_id = data.sub_road_id
    if data.member is not None:
        record.member = data.member or None
    return await save(db, record, "Address already exists for this location")


async def delete_address(db: AsyncSession, address_id: int) -> None:
    await soft_delete(db, Address, address_id, "Address")

