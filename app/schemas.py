from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

DevelopmentStatus = Literal["undeveloped", "in_progress", "developed"]
ResidentType = Literal["permanent", "rent"]
WasteDisposal = Literal["local_council", "home"]
MemberType = Literal["permanent", "temporary"]
LampStatus = Literal["working", "broken"]
ActionType = Literal["login", "logout", "create", "update", "delete", "view", "export"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class MessageOut(BaseModel):
    message: str


# ── Location hierarchy ──────────────────────────────────────────────────────

class RoadIn(BaseModel):
    name: str | None = None


class RoadOut(BaseModel):
    id: int
    name: str
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class SubRoadIn(BaseModel):
    name: str | None = None
    road_id: int | None = None


class SubRoadOut(BaseModel):
    id: int
    name: str
    road_id: int
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class SubSubRoadIn(BaseModel):
    name: str | None = None
    road_id: int | None = None
    parent_sub_road_id: int | None = None
    development_status: DevelopmentStatus | None = None
    width: float | None = None
    height: float | None = None
    cost_per_sq_ft: float | None = None


class SubSubRoadOut(BaseModel):
    id: int
    name: str
    road_id: int
    parent_sub_road_id: int | None
    width: float
    height: float
    square_feet: float
    cost_per_sq_ft: float
    total_cost: float
    development_status: str
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class AddressIn(BaseModel):
    address: str | None = None
    road_id: int | None = None
    sub_road_id: int | None = None
    member: str | None = None


class MainRoadAddressIn(BaseModel):
    address: str | None = None
    member: str | None = None


class AddressOut(BaseModel):
    id: int
    address: str
    road_id: int
    sub_road_id: int | None
    member: str | None
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


# ── Households & members ────────────────────────────────────────────────────

class HomeDetails(BaseModel):
    assessmentNumber: str | None = None
    residentType: ResidentType
    wasteDisposal: WasteDisposal


class HouseholdMemberIn(BaseModel):
    """Member as sent by the household registration form (camelCase keys)."""

    fullName: str | None = None
    nameWithInitial: str | None = None
    memberType: MemberType | None = None
    nic: str | None = None
    gender: str | None = None
    age: int | None = None
    occupation: str | None = None
    workplace: str | None = None
    schoolName: str | None = None
    grade: int | None = None
    universityName: str | None = None
    otherOccupation: str | None = None
    offersReceiving: list[str | None] | str | None = None
    isDisabled: bool = False
    landHouseStatus: str | None = None
    whatsappNumber: str | None = None
    isDrugUser: bool = False
    isThief: bool = False
    mahapola: bool = False
    aswasuma: bool = False
    wadihitiDimana: bool = False

    @field_validator("grade", "age", mode="before")
    @classmethod
    def blank_numbers(cls, value):
        return _blank_to_none(value)


class HouseholdCreate(BaseModel):
    homeDetails: HomeDetails
    members: list[HouseholdMemberIn] = []
    addressId: int


class HouseholdUpdate(BaseModel):
    assessment_number: str | None = None
    resident_type: ResidentType | None = None
    waste_disposal: WasteDisposal | None = None


class HouseholdOut(BaseModel):
    id: int
    address_id: int
    assessment_number: str | None
    resident_type: str
    waste_disposal: str
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class HouseholdCreated(BaseModel):
    message: str
    household: HouseholdOut


class MemberIn(BaseModel):
    household_id: int | None = None
    full_name: str | None = None
    name_with_initial: str | None = None
    member_type: MemberType | None = None
    nic: str | None = None
    gender: str | None = None
    age: int | None = None
    occupation: str | None = None
    workplace: str | None = None
    school_name: str | None = None
    grade: int | None = None
    university_name: str | None = None
    other_occupation: str | None = None
    offers_receiving: list[str | None] | str | None = None
    is_disabled: bool | None = None
    land_house_status: str | None = None
    whatsapp_number: str | None = None
    is_drug_user: bool | None = None
    is_thief: bool | None = None
    mahapola: bool | None = None
    aswasuma: bool | None = None
    wadihiti_dimana: bool | None = None

    @field_validator("grade", "age", mode="before")
    @classmethod
    def blank_numbers(cls, value):
        return _blank_to_none(value)


class MemberOut(BaseModel):
    id: int
    household_id: int
    full_name: str
    name_with_initial: str
    member_type: str
    nic: str
    gender: str
    age: int | None
    occupation: str
    workplace: str | None
    school_name: str | None
    grade: int | None
    university_name: str | None
    other_occupation: str | None
    offers_receiving: list[str]
    is_disabled: bool
    land_house_status: str | None
    whatsapp_number: str | None
    is_drug_user: bool
    is_thief: bool
    mahapola: bool
    aswasuma: bool
    wadihiti_dimana: bool
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class MemberListItem(MemberOut):
    address: str = ""
    road_name: str = ""
    sub_road_name: str = ""
    road_id: int | None = None
    sub_road_id: int | None = None
    resident_type: str = ""
    assessment_number: str = ""
    waste_disposal: str = ""
    household_created_at: datetime | None = None
    household_updated_at: datetime | None = None
    location: str = ""
    offers: str = ""


# ── Businesses & lamps ──────────────────────────────────────────────────────

class BusinessIn(BaseModel):
    business_name: str | None = None
    business_owner: str | None = None
    business_type: str | None = None
    business_address: str | None = None
    business_phone: str | None = None
    road_id: int | None = None
    sub_road_id: int | None = None


class BusinessOut(BaseModel):
    id: int
    business_name: str
    business_owner: str
    business_type: str
    business_address: str | None
    business_phone: str | None
    road_id: int
    sub_road_id: int | None
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class BusinessListItem(BusinessOut):
    road_name: str | None = None
    sub_road_name: str | None = None
    address: str | None = None


class RoadLampIn(BaseModel):
    lamp_number: str | None = None
    road_id: int | None = None
    sub_road_id: int | None = None
    address_id: int | None = None
    status: LampStatus | None = None


class LampStatusIn(BaseModel):
    status: str | None = None


class RoadLampOut(BaseModel):
    id: int
    lamp_number: str
    road_id: int
    sub_road_id: int
    address_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class RoadLampListItem(RoadLampOut):
    road_name: str | None = None
    sub_road_name: str | None = None
    address: str | None = None


# ── Road development ────────────────────────────────────────────────────────

class RoadDevelopmentIn(BaseModel):
    id: int | None = None
    name: str | None = None
    road_id: int | None = None
    parent_sub_road_id: int | None = None
    width: float | None = None
    height: float | None = None
    cost_per_sq_ft: float | None = None
    development_status: DevelopmentStatus | None = None


class RoadDevelopmentDelete(BaseModel):
    id: int


class RoadDevelopmentItem(BaseModel):
    id: int
    roadName: str
    subRoadName: str | None = None
    subSubRoadName: str
    width: float
    height: float
    squareFeet: float
    costPerSqFt: float
    totalCost: float
    developmentStatus: str
    roadType: Literal["main", "sub"]
    createdAt: datetime


class RoadDevelopmentStats(BaseModel):
    totalProjects: int
    developedProjects: int
    undevelopedProjects: int
    inProgressProjects: int
    totalEstimatedCost: float


# ── Dashboard ───────────────────────────────────────────────────────────────

class DashboardStats(BaseModel):
    totalMembers: int
    totalHouseholds: int
    totalBusinesses: int
    totalRoadLamps: int
    workingLamps: int
    brokenLamps: int


class ChartSlice(BaseModel):
    label: str
    value: int
    color: str


class MemberStats(BaseModel):
    genderStats: list[ChartSlice]
    ageGroups: list[ChartSlice]
    memberTypes: list[ChartSlice]
    occupations: list[ChartSlice]
    disabilities: list[ChartSlice]


# ── Auth & activity logs ────────────────────────────────────────────────────

class AuthUser(BaseModel):
    username: str
    isAdmin: Literal[True] = True


class LoginOut(BaseModel):
    message: str
    token: str
    user: AuthUser


class ActivityLogIn(BaseModel):
    username: str
    action_type: ActionType
    resource_type: str | None = None
    resource_id: str | None = None
    description: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] | None = None


class ActivityLogOut(BaseModel):
    id: int
    username: str
    action_type: str
    resource_type: str | None
    resource_id: str | None
    description: str | None
    ip_address: str | None
    user_agent: str | None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias=AliasChoices("metadata_", "metadata"))
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityLogFilters(BaseModel):
    username: str | None = None
    action_type: str | None = None
    resource_type: str | None = None
    limit: int = 50
    offset: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None


class ActivityLogPage(BaseModel):
    success: bool = True
    data: list[ActivityLogOut]
    count: int
    filters: ActivityLogFilters | None = None
    message: str
