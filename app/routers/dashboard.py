from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app import dashboard
from app.database import get_db
from app.schemas import DashboardStats, MemberStats

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(db: AsyncSession = Depends(get_db)) -> DashboardStats:
    return await dashboard.dashboard_stats(db)


@router.get("/dashboard/member-stats", response_model=MemberStats)
async def member_stats(db: AsyncSession = Depends(get_db)) -> MemberStats:
    return await dashboard.member_stats(db)
