from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.activity import get_activity_logs, get_recent_logins, log_user_activity
from app.auth import require_admin
from app.database import get_db
from app.errors import InternalError
from app.schemas import ActivityLogFilters, ActivityLogIn, ActivityLogOut, ActivityLogPage, MessageOut

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/activity-logs", response_model=ActivityLogPage)
async def list_activity_logs(
    username: str | None = Query(None),
    action_type: str | None = Query(None),
    resource_type: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    recent_logins: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> ActivityLogPage:
    if recent_logins:
        rows = await get_recent_logins(db, limit)
        return ActivityLogPage(
            data=[ActivityLogOut.model_validate(row) for row in rows],
            count=len(rows),
            message="Recent login activities retrieved successfully",
        )

    filters = ActivityLogFilters(
        username=username or None,
        action_type=action_type or None,
        resource_type=resource_type or None,
        limit=limit,
        offset=offset,
        start_date=start_date,
        end_date=end_date,
    )
    rows, count = await get_activity_logs(db, filters)
    return ActivityLogPage(
        data=[ActivityLogOut.model_validate(row) for row in rows],
        count=count,
        filters=filters,
        message="Activity logs retrieved successfully",
    )


@router.post("/activity-logs", response_model=MessageOut, status_code=201)
async def create_activity_log(entry: ActivityLogIn, request: Request) -> MessageOut:
    if not await log_user_activity(request.app.state.backend.sessionmaker, entry):
        raise InternalError("Failed to log activity")
    return MessageOut(message="Activity logged successfully")
