from ninja import Schema, Field
from typing import Optional
from datetime import datetime


class PersonOut(Schema):
    id: int
    username: str = Field(..., max_length=50)
    display_name: str
    role: str


class MembershipOut(Schema):
    duration: str
    start_date: datetime
    end_date: datetime


class IdentityOut(Schema):
    id: int
    email: str
    username: str = Field(..., max_length=50)
    display_name: str
    role: str
    organization_id: Optional[int] = None
    organization_slug: Optional[str] = None
    membership: Optional[MembershipOut] = None
    created_at: Optional[datetime]
