from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import registration
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import HouseholdCreate, HouseholdCreated, HouseholdOut, HouseholdUpdate

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/households", response_model=list[HouseholdOut])
async def list_households(db: AsyncSession = Depends(get_db)):
    return await registration.list_households(db)


@router.post("/households", response_model=HouseholdCreated, status_code=201)
async def create_household(
    data: HouseholdCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> HouseholdCreated:
    household = await registration.create_household(db, data)
    audit_change(
        background_tasks,
        request,
        user,
        "create",
        "household",
        household.id,
        f"Registered household with {len(data.members)} member(s)",
    )
    return HouseholdCreated(
        message="Household created successfully",
        household=HouseholdOut.model_validate(household),
    )


@router.get("/households/{household_id}", response_model=HouseholdOut)
async def get_household(household_id: int, db: AsyncSession = Depends(get_db)):
    return await registration.get_household(db, household_id)


@router.put("/households/{household_id}", response_model=HouseholdOut)
async def update_household(
    household_id: int,
    data: HouseholdUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    household = await registration.update_household(db, household_id, data)
    audit_change(
        background_tasks, request, user, "update", "household", household.id, f"Updated household {household.id}"
    )
    return household
