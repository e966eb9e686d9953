from accounts.models import Role
from core.errors import AuthorizationError
from organizations.models import Affiliation
from django.core.cache import cache

# Operations gated by check_capability and the actor variants allowed to run them.
RESOLVE_JOIN_REQUEST = "resolve_join_request"
LIST_JOIN_REQUESTS = "list_join_requests"
RESOLVE_MEMBERSHIP_REQUEST = "resolve_membership_request"
LIST_MEMBERSHIP_REQUESTS = "list_membership_requests"
SET_MEMBERSHIP = "set_membership"
LIST_MEMBERS = "list_members"
LIST_STAFF = "list_staff"
REMOVE_AFFILIATE = "remove_affiliate"

CAPABILITIES = {
    RESOLVE_JOIN_REQUEST: {Role.OWNER, Role.STAFF},
    LIST_JOIN_REQUESTS: {Role.OWNER, Role.STAFF},
    RESOLVE_MEMBERSHIP_REQUEST: {Role.OWNER, Role.STAFF},
    LIST_MEMBERSHIP_REQUESTS: {Role.OWNER, Role.STAFF},
    SET_MEMBERSHIP: {Role.OWNER, Role.STAFF},
    LIST_MEMBERS: {Role.OWNER, Role.STAFF},
    LIST_STAFF: {Role.OWNER},
    REMOVE_AFFILIATE: {Role.OWNER},
}

CACHE_TIMEOUT = 3600


def check_capability(operation, actor_variant, actor_org_id, resource_org_id, requester_variant=None):
    """Raise AuthorizationError unless the actor may run ``operation`` on the resource.

    Owners act on the organization they own, staff on the one they are affiliated
    with. Staff may only touch Member-originated resources: pass the originating
    person's variant as ``requester_variant`` when there is one.
    """
    if actor_variant not in CAPABILITIES[operation]:
        raise AuthorizationError("Access denied")
    if actor_org_id is None or actor_org_id != resource_org_id:
        raise AuthorizationError("Request does not belong to this organization")
    if actor_variant == Role.STAFF and requester_variant is not None and requester_variant != Role.MEMBER:
        raise AuthorizationError("Staff can only manage member requests")


def is_owner(user, org):
    """Return True if user owns the org."""
    return org.owner_id is not None and org.owner_id == user.id


def is_staff_member(user, org):
    """Return True if user is affiliated with the org as staff."""
    cache_key = f'is_staff_member_{user.id}_{org.id}'
    result = cache.get(cache_key)
    if result is None:
        result = Affiliation.objects.filter(person=user, organization=org, role=Role.STAFF).exists()
        cache.set(cache_key, result, timeout=CACHE_TIMEOUT)
    return result


def is_affiliated(user, org):
    """Return True if user belongs to the org in any capacity (owner, staff or member)."""
    if is_owner(user, org):
        return True
    cache_key = f'is_affiliated_{user.id}_{org.id}'
    result = cache.get(cache_key)
    if result is None:
        result = Affiliation.objects.filter(person=user, organization=org).exists()
        cache.set(cache_key, result, timeout=CACHE_TIMEOUT)
    return result


def affiliation_cache_keys(person_id, org_id):
    return [f"{kind}_{person_id}_{org_id}" for kind in ("is_staff_member", "is_affiliated")]
