from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import hierarchy
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import AddressOut, MainRoadAddressIn, MessageOut, RoadIn, RoadOut, SubRoadOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/roads", response_model=list[RoadOut])
async def list_roads(db: AsyncSession = Depends(get_db)):
    return await hierarchy.list_roads(db)


@router.post("/roads", response_model=RoadOut, status_code=201)
async def create_road(
    data: RoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    road = await hierarchy.create_road(db, data)
    audit_change(background_tasks, request, user, "create", "road", road.id, f"Created road {road.name}")
    return road


@router.put("/roads/{road_id}", response_model=RoadOut)
async def update_road(
    road_id: int,
    data: RoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    road = await hierarchy.update_road(db, road_id, data)
    audit_change(background_tasks, request, user, "update", "road", road.id, f"Updated road {road.name}")
    return road


@router.delete("/roads/{road_id}", response_model=MessageOut)
async def delete_road(
    road_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await hierarchy.delete_road(db, road_id)
    audit_change(background_tasks, request, user, "delete", "road", road_id, f"Deleted road {road_id}")
    return MessageOut(message="Road deleted successfully")


# ── Nested lookups used by the registration forms ───────────────────────────

@router.get("/roads/{road_id}/sub-roads", response_model=list[SubRoadOut])
async def list_road_sub_roads(road_id: int, db: AsyncSession = Depends(get_db)):
    return await hierarchy.list_sub_roads(db, road_id=road_id)


@router.get("/roads/{road_id}/addresses", response_model=list[AddressOut])
async def list_main_road_addresses(road_id: int, db: AsyncSession = Depends(get_db)):
    return await hierarchy.list_addresses(db, road_id=road_id)


@router.post("/roads/{road_id}/addresses", response_model=AddressOut, status_code=201)
async def create_main_road_address(
    road_id: int,
    data: MainRoadAddressIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    address = await hierarchy.create_main_road_address(db, road_id, data)
    audit_change(
        background_tasks, request, user, "create", "address", address.id, f"Created address {address.address}"
    )
    return address


@router.get("/roads/{road_id}/sub-roads/{sub_road_id}/addresses", response_model=list[AddressOut])
async def list_sub_road_addresses(road_id: int, sub_road_id: int, db: AsyncSession = Depends(get_db)):
    return await hierarchy.list_addresses(db, road_id=road_id, sub_road_id=sub_road_id)
