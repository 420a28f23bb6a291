"""
Road-development projects (sub-sub-roads with cost estimates).

``square_feet`` and ``total_cost`` are always derived here from width, height
and cost per square foot. Values sent by a client for the derived fields are
never stored.
"""
import math
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.errors import DuplicateName, ValidationError
from app.models import Road, SubRoad, SubSubRoad
from app.records import get_active, has_active, is_active, nullable_match, require, save, soft_delete
from app.schemas import RoadDevelopmentIn, RoadDevelopmentItem, RoadDevelopmentStats

DEFAULT_WIDTH = 25.0
DEFAULT_HEIGHT = 10.0
DEFAULT_COST_PER_SQ_FT = 400.0

# Exclusive upper bounds set by the column precision
MAX_VALUES = {
    "width": 1_000_000,
    "height": 1_000_000,
    "cost_per_sq_ft": 100_000_000,
    "square_feet": 100_000_000,
    "total_cost": 10_000_000_000_000,
}


def calculate_costs(width: float, height: float, cost_per_sq_ft: float) -> tuple[float, float]:
    square_feet = width * height
    return square_feet, square_feet * cost_per_sq_ft


def _check_dimensions(**values: float | None) -> None:
    for field, value in values.items():
        if value is None:
            continue
        if not math.isfinite(value):
            raise ValidationError(f"{field} must be a finite number")
        if value <= 0:
            raise ValidationError(f"{field} must be greater than 0")
        if value >= MAX_VALUES[field]:
            raise ValidationError(f"{field} must be less than {MAX_VALUES[field]}")


def apply_dimensions(
    project: SubSubRoad,
    width: float | None = None,
    height: float | None = None,
    cost_per_sq_ft: float | None = None,
) -> SubSubRoad:
    """Store the given inputs and recompute the derived fields.

    Inputs that are not given keep the row's current value, or the column
    default for a row that has not been flushed yet.
    """
    _check_dimensions(width=width, height=height, cost_per_sq_ft=cost_per_sq_ft)

    if width is not None:
        project.width = width
    elif project.width is None:
        project.width = DEFAULT_WIDTH
    if height is not None:
        project.height = height
    elif project.height is None:
        project.height = DEFAULT_HEIGHT
    if cost_per_sq_ft is not None:
        project.cost_per_sq_ft = cost_per_sq_ft
    elif project.cost_per_sq_ft is None:
        project.cost_per_sq_ft = DEFAULT_COST_PER_SQ_FT

    project.square_feet, project.total_cost = calculate_costs(
        project.width, project.height, project.cost_per_sq_ft
    )
    if project.square_feet >= MAX_VALUES["square_feet"] or project.total_cost >= MAX_VALUES["total_cost"]:
        raise ValidationError("Project is too large to cost")
    return project


# ── Statistics ───────────────────────────────────────────────────────────────

def stats_from_groups(groups: dict[str, tuple[int, float]]) -> RoadDevelopmentStats:
    """Build the statistics from ``{status: (count, summed total_cost)}``."""
    return RoadDevelopmentStats(
        totalProjects=sum(count for count, _ in groups.values()),
        developedProjects=groups.get("developed", (0, 0.0))[0],
        undevelopedProjects=groups.get("undeveloped", (0, 0.0))[0],
        inProgressProjects=groups.get("in_progress", (0, 0.0))[0],
        totalEstimatedCost=float(sum(cost for _, cost in groups.values())),
    )


def summarize(projects: Iterable[RoadDevelopmentItem]) -> RoadDevelopmentStats:
    groups: dict[str, tuple[int, float]] = {}
    for project in projects:
        count, cost = groups.get(project.developmentStatus, (0, 0.0))
        groups[project.developmentStatus] = (count + 1, cost + (project.totalCost or 0))
    return stats_from_groups(groups)


async def project_stats(db: AsyncSession) -> RoadDevelopmentStats:
    stmt = (
        select(
            SubSubRoad.development_status,
            func.count(SubSubRoad.id),
            func.coalesce(func.sum(SubSubRoad.total_cost), 0),
        )
        .join(Road, Road.id == SubSubRoad.road_id)
        .where(is_active(SubSubRoad))
        .group_by(SubSubRoad.development_status)
    )
    rows = await db.execute(stmt)
    return stats_from_groups({status: (count, float(cost)) for status, count, cost in rows.all()})


# ── Projects ─────────────────────────────────────────────────────────────────

def to_item(project: SubSubRoad, road_name: str | None, sub_road_name: str | None) -> RoadDevelopmentItem:
    return RoadDevelopmentItem(
        id=project.id,
        roadName=road_name or "Unknown Road",
        subRoadName=sub_road_name or None,
        subSubRoadName=project.name or "",
        width=project.width,
        height=project.height,
        squareFeet=project.square_feet,
        costPerSqFt=project.cost_per_sq_ft,
        totalCost=project.total_cost or 0,
        developmentStatus=project.development_status or "undeveloped",
        roadType="sub" if sub_road_name else "main",
        createdAt=project.created_at,
    )


async def list_projects(db: AsyncSession) -> list[RoadDevelopmentItem]:
    parent = aliased(SubRoad)
    stmt = (
        select(SubSubRoad, Road.name, parent.name)
        .join(Road, Road.id == SubSubRoad.road_id)
        .outerjoin(parent, parent.id == SubSubRoad.parent_sub_road_id)
        .where(is_active(SubSubRoad))
        .order_by(SubSubRoad.name)
    )
    rows = await db.execute(stmt)
    return [to_item(project, road_name, sub_road_name) for project, road_name, sub_road_name in rows.all()]


async def create_project(db: AsyncSession, data: RoadDevelopmentIn) -> SubSubRoad:
    require("Missing required fields: name, road_id, width and height are required",
            data.name, data.road_id, data.width, data.height)
    name = data.name.strip()
    message = "A development project with this name already exists for this road section"

    if await has_active(
        db,
        SubSubRoad,
        SubSubRoad.name == name,
        SubSubRoad.road_id == data.road_id,
        nullable_match(SubSubRoad.parent_sub_road_id, data.parent_sub_road_id),
    ):
        raise DuplicateName(message)

    project = SubSubRoad(
        name=name,
        road_id=data.road_id,
        parent_sub_road_id=data.parent_sub_road_id,
        development_status=data.development_status or "undeveloped",
    )
    cost_per_sq_ft = data.cost_per_sq_ft if data.cost_per_sq_ft is not None else DEFAULT_COST_PER_SQ_FT
    apply_dimensions(project, data.width, data.height, cost_per_sq_ft)
    return await save(db, project, message)


async def update_project(db: AsyncSession, data: RoadDevelopmentIn) -> SubSubRoad:
    require("Missing required fields: id, width, height and cost_per_sq_ft are required",
            data.id, data.width, data.height, data.cost_per_sq_ft)

    project = await get_active(db, SubSubRoad, data.id, "Road development")
    apply_dimensions(project, data.width, data.height, data.cost_per_sq_ft)
    if data.development_status:
        project.development_status = data.development_status
    return await save(db, project, "Road development could not be updated")


async def delete_project(db: AsyncSession, project_id: int) -> None:
    await soft_delete(db, SubSubRoad, project_id, "Road development")
