"""
Soft-delete aware helpers shared by the rule modules.

Every registry table carries ``is_deleted``; "active" means not soft-deleted.
"""
from datetime import datetime, timezone
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound, ValidationError, translate_integrity_error

ModelT = TypeVar("ModelT")


def is_active(model):
    return model.is_deleted.is_(False)


def require(message: str, *values: Any) -> None:
    """Reject the payload when any required value is missing or blank."""
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


async def has_active(db: AsyncSession, model, *conditions) -> bool:
    row = await db.execute(select(model.id).where(is_active(model), *conditions).limit(1))
    return row.first() is not None


async def get_active(db: AsyncSession, model: type[ModelT], record_id: int, label: str) -> ModelT:
    record = await db.scalar(select(model).where(model.id == record_id, is_active(model)))
    if record is None:
        raise NotFound(f"{label} not found")
    return record


async def save(db: AsyncSession, record, duplicate_message: str):
    """Flush and commit ``record``; unique-index races surface as 409."""
    db.add(record)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise translate_integrity_error(exc, duplicate_message) from exc
    return record


async def soft_delete(db: AsyncSession, model, record_id: int, label: str, touch: bool = False) -> None:
    record = await get_active(db, model, record_id, label)
    record.is_deleted = True
    if touch:
        record.updated_at = datetime.now(timezone.utc)
    await db.commit()


def nullable_match(column, value):
    """Equality that treats a missing value as ``IS NULL``."""
    if value is None:
        return column.is_(None)
    return column == value
