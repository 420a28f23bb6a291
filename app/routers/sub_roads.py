from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import hierarchy
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import MessageOut, SubRoadIn, SubRoadOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/sub-roads", response_model=list[SubRoadOut])
async def list_sub_roads(
    road_id: int | None = Query(None, description="Only sub-roads of this road"),
    db: AsyncSession = Depends(get_db),
):
    return await hierarchy.list_sub_roads(db, road_id=road_id)


@router.post("/sub-roads", response_model=SubRoadOut, status_code=201)
async def create_sub_road(
    data: SubRoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    sub_road = await hierarchy.create_sub_road(db, data)
    audit_change(
        background_tasks, request, user, "create", "sub_road", sub_road.id, f"Created sub-road {sub_road.name}"
    )
    return sub_road


@router.put("/sub-roads/{sub_road_id}", response_model=SubRoadOut)
async def update_sub_road(
    sub_road_id: int,
    data: SubRoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    sub_road = await hierarchy.update_sub_road(db, sub_road_id, data)
    audit_change(
        background_tasks, request, user, "update", "sub_road", sub_road.id, f"Updated sub-road {sub_road.name}"
    )
    return sub_road


@router.delete("/sub-roads/{sub_road_id}", response_model=MessageOut)
async def delete_sub_road(
    sub_road_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await hierarchy.delete_sub_road(db, sub_road_id)
    audit_change(
        background_tasks, request, user, "delete", "sub_road", sub_road_id, f"Deleted sub-road {sub_road_id}"
    )
    return MessageOut(message="Sub-road deleted successfully")
