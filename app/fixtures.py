"""Fixture set served by the in-memory backend when no database is configured."""
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.development import apply_dimensions
from app.models import Address, Road, SubRoad, SubSubRoad

CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)

ROADS = [
    (1, "Main Road"),
    (2, "Temple Road"),
    (3, "School Lane"),
    (4, "Market Street"),
]

# (id, name, road_id)
SUB_ROADS = [
    (1, "Sub Road A", 1),
    (2, "Sub Road B", 1),
    (3, "Temple Path", 2),
    (4, "School Path", 3),
]

# (id, address, road_id, sub_road_id)
ADDRESSES = [
    (1, "123 Sample Address", 1, 1),
    (2, "124 Sample Address", 1, 1),
    (3, "125 Sample Address", 1, 2),
    (4, "456 Temple Address", 2, 3),
]

# (id, name, road_id, parent_sub_road_id, width, height, cost_per_sq_ft, status)
DEVELOPMENT_PROJECTS = [
    (1, "1st Lane", 1, None, 25, 40, 400, "developed"),
    (2, "2nd Lane", 1, None, 25, 35, 400, "undeveloped"),
    (3, "Temple Lane", 2, 3, 30, 30, 350, "in_progress"),
]


async def seed_fixtures(session: AsyncSession) -> None:
    session.add_all(Road(id=id_, name=name, created_at=CREATED_AT) for id_, name in ROADS)
    await session.flush()

    session.add_all(
        SubRoad(id=id_, name=name, road_id=road_id, created_at=CREATED_AT)
        for id_, name, road_id in SUB_ROADS
    )
    await session.flush()

    session.add_all(
        Address(id=id_, address=address, road_id=road_id, sub_road_id=sub_road_id, created_at=CREATED_AT)
        for id_, address, road_id, sub_road_id in ADDRESSES
    )

    for id_, name, road_id, parent_id, width, height, cost, status in DEVELOPMENT_PROJECTS:
        project = SubSubRoad(
            id=id_,
            name=name,
            road_id=road_id,
            parent_sub_road_id=parent_id,
            development_status=status,
            created_at=CREATED_AT,
        )
        session.add(apply_dimensions(project, width, height, cost))
    await session.flush()
