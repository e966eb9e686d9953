from ninja.errors import HttpError
from organizations.models import Organization


def require_authenticated_user(user):
    if user is None or not getattr(user, "is_authenticated", False):
        raise HttpError(401, "Authentication required")
    return user


def get_request_user(request):
    return require_authenticated_user(getattr(request, "auth", None) or getattr(request, "user", None))


def get_org_or_404(slug):
    try:
        return Organization.objects.select_related("owner").get(slug=slug)
    except Organization.DoesNotExist:
        raise HttpError(404, "Organization not found")
