from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import facilities
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import BusinessIn, BusinessListItem, BusinessOut, MessageOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/businesses", response_model=list[BusinessListItem])
async def list_businesses(db: AsyncSession = Depends(get_db)) -> list[BusinessListItem]:
    return await facilities.list_businesses(db)


@router.post("/businesses", response_model=BusinessOut, status_code=201)
async def create_business(
    data: BusinessIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    business = await facilities.create_business(db, data)
    audit_change(
        background_tasks, request, user, "create", "business", business.id, f"Created business {business.business_name}"
    )
    return business


@router.put("/businesses/{business_id}", response_model=BusinessOut)
async def update_business(
    business_id: int,
    data: BusinessIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    business = await facilities.update_business(db, business_id, data)
    audit_change(
        background_tasks, request, user, "update", "business", business.id, f"Updated business {business.business_name}"
    )
    return business


@router.delete("/businesses/{business_id}", response_model=MessageOut)
async def delete_business(
    business_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await facilities.delete_business(db, business_id)
    audit_change(background_tasks, request, user, "delete", "business", business_id, f"Deleted business {business_id}")
    return MessageOut(message="Business deleted successfully")
