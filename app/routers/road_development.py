"""
Road-development projects as the infrastructure screen sees them.

Reads are projected to the screen's camelCase fields (``roadName``,
``squareFeet``...); writes take the store's snake_case fields and identify the
project by ``id`` in the body.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import development
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import (
    MessageOut,
    RoadDevelopmentDelete,
    RoadDevelopmentIn,
    RoadDevelopmentItem,
    RoadDevelopmentStats,
    SubSubRoadOut,
)

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/road-development", response_model=list[RoadDevelopmentItem] | RoadDevelopmentStats)
async def list_road_development(
    stats: bool = Query(False, description="Return the project statistics instead of the list"),
    db: AsyncSession = Depends(get_db),
):
    if stats:
        return await development.project_stats(db)
    return await development.list_projects(db)


@router.post("/road-development", response_model=SubSubRoadOut, status_code=201)
async def create_road_development(
    data: RoadDevelopmentIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    project = await development.create_project(db, data)
    audit_change(
        background_tasks,
        request,
        user,
        "create",
        "road_development",
        project.id,
        f"Created development project {project.name}",
    )
    return project


@router.put("/road-development", response_model=SubSubRoadOut)
async def update_road_development(
    data: RoadDevelopmentIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    project = await development.update_project(db, data)
    audit_change(
        background_tasks,
        request,
        user,
        "update",
        "road_development",
        project.id,
        f"Updated development project {project.name}",
    )
    return project


@router.delete("/road-development", response_model=MessageOut)
async def delete_road_development(
    data: RoadDevelopmentDelete,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await development.delete_project(db, data.id)
    audit_change(
        background_tasks, request, user, "delete", "road_development", data.id, f"Deleted development project {data.id}"
    )
    return MessageOut(message="Road development deleted successfully")
