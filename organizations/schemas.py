from typing import List, Optional
from ninja import Schema
from accounts.schemas import PersonOut


class OrganizationOut(Schema):
    id: int
    name: str
    slug: str
    owner: Optional[PersonOut] = None


class OrganizationDetailOut(OrganizationOut):
    staff: List[PersonOut]
    members: List[PersonOut]
