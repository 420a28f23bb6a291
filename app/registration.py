"""
Household and member registration rules.

A household is registered together with its members in one transaction: if
any member fails, nothing is written.
"""
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.errors import DuplicateKey, ValidationError
from app.models import Address, Household, Member, Road, SubRoad, utcnow
from app.records import get_active, has_active, is_active, require, save, soft_delete
from app.schemas import HouseholdCreate, HouseholdMemberIn, HouseholdUpdate, MemberIn, MemberListItem, MemberOut

logger = logging.getLogger(__name__)

MIN_AGE = 0
MAX_AGE = 150


def coerce_offers(value: Any) -> list[str]:
    """A list is kept, a single value is wrapped; empty entries are dropped."""
    items = value if isinstance(value, list) else [value]
    return [item for item in items if item]


def check_age(age: int | None) -> None:
    if age is not None and not MIN_AGE <= age <= MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}")


def _duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for value in values:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _member_from_form(member: HouseholdMemberIn) -> Member:
    require("Missing required member fields", member.fullName, member.nameWithInitial,
            member.nic, member.gender, member.occupation)
    check_age(member.age)

    return Member(
        full_name=member.fullName.strip(),
        name_with_initial=member.nameWithInitial.strip(),
        member_type=member.memberType or "permanent",
        nic=member.nic.strip(),
        gender=member.gender,
        age=member.age,
        occupation=member.occupation,
        workplace=member.workplace or None,
        school_name=member.schoolName or None,
        grade=member.grade,
        university_name=member.universityName or None,
        other_occupation=member.otherOccupation or None,
        offers_receiving=coerce_offers(member.offersReceiving),
        is_disabled=member.isDisabled,
        land_house_status=member.landHouseStatus or None,
        whatsapp_number=member.whatsappNumber or None,
        is_drug_user=member.isDrugUser,
        is_thief=member.isThief,
        mahapola=member.mahapola,
        aswasuma=member.aswasuma,
        wadihiti_dimana=member.wadihitiDimana,
    )


# ── Households ───────────────────────────────────────────────────────────────

async def create_household(db: AsyncSession, data: HouseholdCreate) -> Household:
    await get_active(db, Address, data.addressId, "Address")

    members = [_member_from_form(member) for member in data.members]
    nics = [member.nic for member in members]

    duplicates = _duplicates(nics)
    if nics and not duplicates:
        rows = await db.execute(select(Member.nic).where(Member.nic.in_(nics), is_active(Member)))
        duplicates = list(rows.scalars().all())
    if duplicates:
        raise DuplicateKey(
            f"Duplicate NIC(s) found: {', '.join(duplicates)}. "
            "These members already exist in the system."
        )

    details = data.homeDetails
    household = Household(
        address_id=data.addressId,
        assessment_number=details.assessmentNumber or None,
        resident_type=details.residentType,
        waste_disposal=details.wasteDisposal,
        members=members,
    )
    await save(db, household, "Duplicate NIC(s) found. These members already exist in the system.")
    logger.info("Household %s registered with %d member(s)", household.id, len(members))
    return household


async def list_households(db: AsyncSession) -> list[Household]:
    stmt = select(Household).where(is_active(Household)).order_by(Household.created_at.desc(), Household.id.desc())
    rows = await db.execute(stmt)
    return list(rows.scalars().all())


async def get_household(db: AsyncSession, household_id: int) -> Household:
    return await get_active(db, Household, household_id, "Household")


async def update_household(db: AsyncSession, household_id: int, data: HouseholdUpdate) -> Household:
    require("Missing required household fields", data.assessment_number, data.resident_type, data.waste_disposal)

    household = await get_active(db, Household, household_id, "Household")
    household.assessment_number = data.assessment_number
    household.resident_type = data.resident_type
    household.waste_disposal = data.waste_disposal
    household.updated_at = utcnow()
    return await save(db, household, "Household could not be updated")


# ── Members ──────────────────────────────────────────────────────────────────

def _check_member(data: MemberIn) -> None:
    require("Missing required fields", data.household_id, data.full_name, data.name_with_initial,
            data.nic, data.gender, data.occupation)
    check_age(data.age)


def _apply_member(member: Member, data: MemberIn) -> None:
    member.household_id = data.household_id
    member.full_name = data.full_name.strip()
    member.name_with_initial = data.name_with_initial.strip()
    member.member_type = data.member_type or "permanent"
    member.nic = data.nic.strip()
    member.gender = data.gender
    member.age = data.age
    member.occupation = data.occupation
    member.school_name = data.school_name or None
    member.grade = data.grade
    member.university_name = data.university_name or None
    member.other_occupation = data.other_occupation or None
    member.offers_receiving = coerce_offers(data.offers_receiving)
    member.is_disabled = bool(data.is_disabled)
    member.land_house_status = data.land_house_status or None
    member.whatsapp_number = data.whatsapp_number or None
    member.is_drug_user = bool(data.is_drug_user)
    member.is_thief = bool(data.is_thief)

    # Optional on this route; an omitted value keeps what the household form stored
    if data.workplace is not None:
        member.workplace = data.workplace or None
    for flag in ("mahapola", "aswasuma", "wadihiti_dimana"):
        value = getattr(data, flag)
        if value is not None:
            setattr(member, flag, value)
        elif getattr(member, flag) is None:
            setattr(member, flag, False)


async def create_member(db: AsyncSession, data: MemberIn) -> Member:
    _check_member(data)

    if await has_active(db, Member, Member.nic == data.nic.strip()):
        raise DuplicateKey("NIC already exists")

    member = Member()
    _apply_member(member, data)
    return await save(db, member, "NIC already exists")


async def update_member(db: AsyncSession, member_id: int, data: MemberIn) -> Member:
    _check_member(data)

    if await has_active(db, Member, Member.nic == data.nic.strip(), Member.id != member_id):
        raise DuplicateKey("NIC already exists")

    member = await get_active(db, Member, member_id, "Member")
    _apply_member(member, data)
    member.updated_at = utcnow()
    return await save(db, member, "NIC already exists")


async def delete_member(db: AsyncSession, member_id: int) -> None:
    await soft_delete(db, Member, member_id, "Member", touch=True)


def location_breadcrumb(*parts: str | None) -> str:
    return " > ".join(part for part in parts if part)


async def list_members(db: AsyncSession) -> list[MemberListItem]:
    """Active members with their household, address and road names flattened in."""
    sub_road = aliased(SubRoad)
    stmt = (
        select(Member, Household, Address, Road.name, sub_road.name)
        .join(Household, Household.id == Member.household_id)
        .join(Address, Address.id == Household.address_id)
        .outerjoin(Road, Road.id == Address.road_id)
        .outerjoin(sub_road, sub_road.id == Address.sub_road_id)
        .where(is_active(Member))
        .order_by(Member.full_name, Member.id)
    )
    rows = await db.execute(stmt)

    items = []
    for member, household, address, road_name, sub_road_name in rows.all():
        base = MemberOut.model_validate(member).model_dump()
        items.append(
            MemberListItem(
                **base,
                address=address.address or "",
                road_name=road_name or "",
                sub_road_name=sub_road_name or "",
                road_id=address.road_id,
                sub_road_id=address.sub_road_id,
                resident_type=household.resident_type or "",
                assessment_number=household.assessment_number or "",
                waste_disposal=household.waste_disposal or "",
                household_created_at=household.created_at,
                household_updated_at=household.updated_at,
                location=location_breadcrumb(road_name, sub_road_name, address.address),
                offers=", ".join(member.offers_receiving or []),
            )
        )
    return items
