from typing import List
from ninja import Router
from ninja.pagination import LimitOffsetPagination, paginate
from ninja_jwt.authentication import JWTAuth
from accounts.models import Role
from core.utils.auth_utils import get_org_or_404, get_request_user
from organizations.models import Organization
from organizations.schemas import OrganizationDetailOut, OrganizationOut

router = Router(tags=["organizations"])


@router.get("/", response=List[OrganizationOut], auth=JWTAuth())
@paginate(LimitOffsetPagination)
def list_organizations(request, search: str = None):
    get_request_user(request)
    qs = Organization.objects.select_related("owner").order_by("name", "id")
    if search:
        qs = qs.filter(name__icontains=search)
    return qs


@router.get("/{slug}/", response=OrganizationDetailOut, auth=JWTAuth())
def get_organization(request, slug: str):
    """Organization with its staff and member roster (chat counterparts are picked from here)."""
    get_request_user(request)
    org = get_org_or_404(slug)
    affiliations = list(org.affiliations.select_related("person").order_by("person__username"))
    org_staff = [a.person for a in affiliations if a.role == Role.STAFF]
    org_members = [a.person for a in affiliations if a.role == Role.MEMBER]
    return {
        "id": org.id,
        "name": org.name,
        "slug": org.slug,
        "owner": org.owner,
        "staff": org_staff,
        "members": org_members,
    }
