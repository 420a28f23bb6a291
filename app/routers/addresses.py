from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import hierarchy
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import AddressIn, AddressOut, MessageOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/addresses", response_model=list[AddressOut])
async def list_addresses(
    road_id: int | None = Query(None),
    sub_road_id: int | None = Query(None, description="Omit for main-road addresses of road_id"),
    db: AsyncSession = Depends(get_db),
):
    return await hierarchy.list_addresses(db, road_id=road_id, sub_road_id=sub_road_id)


@router.post("/addresses", response_model=AddressOut, status_code=201)
async def create_address(
    data: AddressIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    address = await hierarchy.create_address(db, data)
    audit_change(
        background_tasks, request, user, "create", "address", address.id, f"Created address {address.address}"
    )
    return address


@router.put("/addresses/{address_id}", response_model=AddressOut)
async def update_address(
    address_id: int,
    data: AddressIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    address = await hierarchy.update_address(db, address_id, data)
    audit_change(
        background_tasks, request, user, "update", "address", address.id, f"Updated address {address.address}"
    )
    return address


@router.delete("/addresses/{address_id}", response_model=MessageOut)
async def delete_address(
    address_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await hierarchy.delete_address(db, address_id)
    audit_change(background_tasks, request, user, "delete", "address", address_id, f"Deleted address {address_id}")
    return MessageOut(message="Address deleted successfully")
