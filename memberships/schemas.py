from datetime import datetime
from typing import Optional
from ninja import Schema
from pydantic import BaseModel, ConfigDict, Field

from accounts.schemas import MembershipOut, PersonOut


class JoinRequestIn(Schema):
    # Required for members, ignored for staff.
    duration: Optional[str] = None


class MembershipRequestIn(Schema):
    duration: Optional[str] = None


class MembershipUpdateIn(Schema):
    duration: Optional[str] = None


class MembershipActionIn(Schema):
    action: str


class JoinRequestOut(BaseModel):
    id: int
    requester: PersonOut
    requester_variant: str
    organization: int = Field(validation_alias="organization_id")
    status: str
    duration: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MembershipRequestOut(BaseModel):
    id: int
    member: PersonOut
    organization: int = Field(validation_alias="organization_id")
    duration: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AffiliationOut(BaseModel):
    person: PersonOut
    organization: int = Field(validation_alias="organization_id")
    role: str
    membership: Optional[MembershipOut] = None

    model_config = ConfigDict(from_attributes=True)


class DetailResponse(BaseModel):
    detail: str


class ErrorResponse(BaseModel):
    detail: str
    code: str
