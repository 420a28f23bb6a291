"""
Audit trail of authenticated actions.

Writes are best-effort: ``log_user_activity`` opens its own session, so a
failed audit insert never rolls back or fails the request that caused it.
Routers schedule entries with ``schedule_activity`` which runs them as a
background task after the response has been sent.
"""
import logging
from datetime import datetime, timezone

from fastapi import BackgroundTasks, Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import ActivityLog
from app.schemas import ActivityLogFilters, ActivityLogIn

logger = logging.getLogger(__name__)


async def log_user_activity(sessionmaker: async_sessionmaker, entry: ActivityLogIn) -> bool:
    try:
        async with sessionmaker() as session:
            session.add(
                ActivityLog(
                    username=entry.username,
                    action_type=entry.action_type,
                    resource_type=entry.resource_type or None,
                    resource_id=entry.resource_id or None,
                    description=entry.description or None,
                    ip_address=entry.ip_address or None,
                    user_agent=entry.user_agent or None,
                    metadata_=entry.metadata or None,
                )
            )
            await session.commit()
    except Exception:
        logger.error(
            "Failed to log %s activity for %s", entry.action_type, entry.username, exc_info=True
        )
        return False

    logger.info(
        "Activity logged: %s %s %s",
        entry.username,
        entry.action_type,
        entry.resource_type or "-",
    )
    return True


def client_ip(request: Request) -> str | None:
    headers = request.headers

    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return headers.get("x-real-ip") or headers.get("x-client-ip") or None


def user_agent(request: Request) -> str | None:
    return request.headers.get("user-agent") or None


def schedule_activity(
    background_tasks: BackgroundTasks,
    request: Request,
    username: str,
    action_type: str,
    **fields,
) -> None:
    entry = ActivityLogIn(
        username=username,
        action_type=action_type,
        ip_address=client_ip(request),
        user_agent=user_agent(request),
        **fields,
    )
    background_tasks.add_task(log_user_activity, request.app.state.backend.sessionmaker, entry)


def audit_change(
    background_tasks: BackgroundTasks,
    request: Request,
    user: dict | None,
    action_type: str,
    resource_type: str,
    resource_id: int,
    description: str,
) -> None:
    """Record a create/update/delete made by a caller that sent a valid token."""
    if user is None:
        return
    schedule_activity(
        background_tasks,
        request,
        user["username"],
        action_type,
        resource_type=resource_type,
        resource_id=str(resource_id),
        description=description,
    )


def as_utc(value: datetime) -> datetime:
    """Normalise a bound to UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def get_activity_logs(db: AsyncSession, filters: ActivityLogFilters) -> tuple[list[ActivityLog], int]:
    conditions = []
    if filters.username:
        conditions.append(ActivityLog.username == filters.username)
    if filters.action_type:
        conditions.append(ActivityLog.action_type == filters.action_type)
    if filters.resource_type:
        conditions.append(ActivityLog.resource_type == filters.resource_type)
    if filters.start_date:
        conditions.append(ActivityLog.created_at >= as_utc(filters.start_date))
    if filters.end_date:
        conditions.append(ActivityLog.created_at <= as_utc(filters.end_date))

    count = await db.scalar(select(func.count(ActivityLog.id)).where(*conditions))

    stmt = (
        select(ActivityLog)
        .where(*conditions)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(filters.limit)
        .offset(filters.offset)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return list(rows), count or 0


async def get_recent_logins(db: AsyncSession, limit: int = 10) -> list[ActivityLog]:
    stmt = (
        select(ActivityLog)
        .where(ActivityLog.action_type == "login")
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())
