from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import hierarchy
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import MessageOut, SubSubRoadIn, SubSubRoadOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/sub-sub-roads", response_model=list[SubSubRoadOut])
async def list_sub_sub_roads(db: AsyncSession = Depends(get_db)):
    return await hierarchy.list_sub_sub_roads(db)


@router.post("/sub-sub-roads", response_model=SubSubRoadOut, status_code=201)
async def create_sub_sub_road(
    data: SubSubRoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    project = await hierarchy.create_sub_sub_road(db, data)
    audit_change(
        background_tasks, request, user, "create", "sub_sub_road", project.id, f"Created sub-sub-road {project.name}"
    )
    return project


@router.put("/sub-sub-roads/{sub_sub_road_id}", response_model=SubSubRoadOut)
async def update_sub_sub_road(
    sub_sub_road_id: int,
    data: SubSubRoadIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    project = await hierarchy.update_sub_sub_road(db, sub_sub_road_id, data)
    audit_change(
        background_tasks, request, user, "update", "sub_sub_road", project.id, f"Updated sub-sub-road {project.name}"
    )
    return project


@router.delete("/sub-sub-roads/{sub_sub_road_id}", response_model=MessageOut)
async def delete_sub_sub_road(
    sub_sub_road_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await hierarchy.delete_sub_sub_road(db, sub_sub_road_id)
    audit_change(
        background_tasks,
        request,
        user,
        "delete",
        "sub_sub_road",
        sub_sub_road_id,
        f"Deleted sub-sub-road {sub_sub_road_id}",
    )
    return MessageOut(message="Sub-sub-road deleted successfully")
