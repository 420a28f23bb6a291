from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import registration
from app.activity import audit_change
from app.auth import current_admin, guard_writes
from app.database import get_db
from app.schemas import MemberIn, MemberListItem, MemberOut, MessageOut

router = APIRouter(dependencies=[Depends(guard_writes)])


@router.get("/members", response_model=list[MemberListItem])
async def list_members(db: AsyncSession = Depends(get_db)) -> list[MemberListItem]:
    return await registration.list_members(db)


@router.post("/members", response_model=MemberOut, status_code=201)
async def create_member(
    data: MemberIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    member = await registration.create_member(db, data)
    audit_change(background_tasks, request, user, "create", "member", member.id, f"Created member {member.full_name}")
    return member


@router.put("/members/{member_id}", response_model=MemberOut)
async def update_member(
    member_id: int,
    data: MemberIn,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
):
    member = await registration.update_member(db, member_id, data)
    audit_change(background_tasks, request, user, "update", "member", member.id, f"Updated member {member.full_name}")
    return member


@router.delete("/members/{member_id}", response_model=MessageOut)
async def delete_member(
    member_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(current_admin),
) -> MessageOut:
    await registration.delete_member(db, member_id)
    audit_change(background_tasks, request, user, "delete", "member", member_id, f"Deleted member {member_id}")
    return MessageOut(message="Member deleted successfully")
