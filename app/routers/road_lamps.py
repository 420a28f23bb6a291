from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import facilities
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import LampStatusIn, MessageOut, RoadLampIn, RoadLampListItem, RoadLampOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/road-lamps", response_model=list[RoadLampListItem])
async def list_road_lamps(db: AsyncSession = Depends(get_db)) -> list[RoadLampListItem]:
    return await facilities.list_road_lamps(db)


@router.post("/road-lamps", response_model=RoadLampOut, status_code=201)
async def create_road_lamp(
    data: RoadLampIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    lamp = await facilities.create_road_lamp(db, data)
    audit_change(background_tasks, request, user, "create", "road_lamp", lamp.id, f"Created lamp {lamp.lamp_number}")
    return lamp


@router.put("/road-lamps/{lamp_id}", response_model=RoadLampOut)
async def update_road_lamp(
    lamp_id: int,
    data: RoadLampIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    lamp = await facilities.update_road_lamp(db, lamp_id, data)
    audit_change(background_tasks, request, user, "update", "road_lamp", lamp.id, f"Updated lamp {lamp.lamp_number}")
    return lamp


@router.patch("/road-lamps/{lamp_id}/status", response_model=RoadLampOut)
async def set_road_lamp_status(
    lamp_id: int,
    data: LampStatusIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    lamp = await facilities.set_lamp_status(db, lamp_id, data.status)
    audit_change(
        background_tasks,
        request,
        user,
        "update",
        "road_lamp",
        lamp.id,
        f"Marked lamp {lamp.lamp_number} as {lamp.status}",
    )
    return lamp


@router.delete("/road-lamps/{lamp_id}", response_model=MessageOut)
async def delete_road_lamp(
    lamp_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await facilities.delete_road_lamp(db, lamp_id)
    audit_change(background_tasks, request, user, "delete", "road_lamp", lamp_id, f"Deleted lamp {lamp_id}")
    return MessageOut(message="Road lamp deleted successfully")
