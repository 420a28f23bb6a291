"""Dashboard aggregates over active rows."""
from collections import Counter

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Business, Household, Member, RoadLamp
from app.records import is_active
from app.schemas import ChartSlice, DashboardStats, MemberStats

GENDERS = (("male", "Male", "#3B82F6"), ("female", "Female", "#EF4444"), ("other", "Other", "#8B5CF6"))

# (label, lowest age, highest age or None for open-ended, colour)
AGE_BRACKETS = (
    ("0-17", 0, 17, "#10B981"),
    ("18-35", 18, 35, "#F59E0B"),
    ("36-55", 36, 55, "#6366F1"),
    ("56+", 56, None, "#EC4899"),
)

MEMBER_TYPES = (("permanent", "Permanent", "#059669"), ("temporary", "Temporary", "#DC2626"))

OCCUPATION_PALETTE = ("#3B82F6", "#10B981", "#F59E0B", "#8B5CF6", "#EF4444", "#6B7280", "#EC4899")


async def _count(db: AsyncSession, model, *conditions) -> int:
    return await db.scalar(select(func.count(model.id)).where(is_active(model), *conditions)) or 0


async def dashboard_stats(db: AsyncSession) -> DashboardStats:
    return DashboardStats(
        totalMembers=await _count(db, Member),
        totalHouseholds=await _count(db, Household),
        totalBusinesses=await _count(db, Business),
        totalRoadLamps=await _count(db, RoadLamp),
        workingLamps=await _count(db, RoadLamp, RoadLamp.status == "working"),
        brokenLamps=await _count(db, RoadLamp, RoadLamp.status == "broken"),
    )


def age_bracket(age: int | None) -> str | None:
    if age is None:
        return None
    for label, low, high, _ in AGE_BRACKETS:
        if age >= low and (high is None or age <= high):
            return label
    return None


def occupation_slices(occupations: list[str | None]) -> list[ChartSlice]:
    """Occupation counts, coloured in order of first appearance and sorted by count."""
    counts = Counter(occupation or "Other" for occupation in occupations)
    slices = [
        ChartSlice(label=label, value=value, color=OCCUPATION_PALETTE[index % len(OCCUPATION_PALETTE)])
        for index, (label, value) in enumerate(counts.items())
    ]
    return sorted(slices, key=lambda s: s.value, reverse=True)


def member_stats_from_rows(rows) -> MemberStats:
    """Build the chart series from ``(gender, age, member_type, occupation, is_disabled)`` rows."""
    rows = list(rows)
    genders = Counter((gender or "").lower() for gender, *_ in rows)
    ages = Counter(age_bracket(row[1]) for row in rows)
    types = Counter(row[2] for row in rows)
    disabled = sum(1 for row in rows if row[4])

    return MemberStats(
        genderStats=[ChartSlice(label=label, value=genders[key], color=color) for key, label, color in GENDERS],
        ageGroups=[ChartSlice(label=label, value=ages[label], color=color) for label, _, _, color in AGE_BRACKETS],
        memberTypes=[ChartSlice(label=label, value=types[key], color=color) for key, label, color in MEMBER_TYPES],
        occupations=occupation_slices([row[3] for row in rows]),
        disabilities=[
            ChartSlice(label="No Disability", value=len(rows) - disabled, color="#10B981"),
            ChartSlice(label="With Disability", value=disabled, color="#EF4444"),
        ],
    )


async def member_stats(db: AsyncSession) -> MemberStats:
    stmt = (
        select(Member.gender, Member.age, Member.member_type, Member.occupation, Member.is_disabled)
        .where(is_active(Member))
        .order_by(Member.id)
    )
    rows = await db.execute(stmt)
    return member_stats_from_rows(rows.all())
