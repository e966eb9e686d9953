from dataclasses import dataclass
from typing import Optional

from accounts.models import Role


@dataclass(frozen=True)
class Identity:
    person_id: int
    variant: str
    organization_id: Optional[int]


def get_identity(user) -> Identity:
    """Resolve ``(person_id, variant, organization_id)`` for an authenticated person.

    Owners act for the organization they own; staff and members for the one they
    are affiliated with. Always reads the database so concurrent lifecycle changes
    are observed.
    """
    from organizations.models import Affiliation, Organization

    if user.role == Role.OWNER:
        org_id = Organization.objects.filter(owner_id=user.id).values_list("id", flat=True).first()
    else:
        org_id = Affiliation.objects.filter(person_id=user.id).values_list("organization_id", flat=True).first()
    return Identity(person_id=user.id, variant=user.role, organization_id=org_id)
