from ninja import Router
from ninja_jwt.authentication import JWTAuth
from accounts.identity import get_identity
from accounts.schemas import IdentityOut
from core.utils.auth_utils import require_authenticated_user
from organizations.models import Affiliation, Organization

users_router = Router()


@users_router.get("/me", response=IdentityOut, auth=JWTAuth())
def get_me(request):
    """The caller's identity as every other endpoint sees it."""
    user = require_authenticated_user(request.auth)
    identity = get_identity(user)
    org = Organization.objects.filter(id=identity.organization_id).first() if identity.organization_id else None
    affiliation = Affiliation.objects.filter(person=user).first()
    user.organization_id = identity.organization_id
    user.organization_slug = org.slug if org else None
    user.membership = affiliation.membership if affiliation else None
    return user
