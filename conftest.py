import os

# Test clients wrap the same NinjaAPI repeatedly; skip ninja's duplicate-API registry check.
os.environ.setdefault("NINJA_SKIP_REGISTRY", "yes")

import pytest
from ninja.testing import TestClient
from ninja import NinjaAPI
from django.conf import settings
from django.core.cache import cache
from FitTrackApi.api import api as project_api


def pytest_configure():
    # Run audit tasks inline; no broker in tests.
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_BROKER_URL = "memory://"


@pytest.fixture(autouse=True)
def _isolate_shared_state():
    """Permission lookups are cached and chat rooms live in the process-wide hub."""
    from chat.hub import hub
    cache.clear()
    hub.reset()
    yield
    hub.reset()
    cache.clear()


@pytest.fixture(scope="function")
def api_client():
    # Use the main project API to prevent re-attaching shared routers
    try:
        NinjaAPI._registry.clear()
    except Exception:
        pass
    return TestClient(project_api)


@pytest.fixture
def make_auth_headers():
    """Return a callable that generates Bearer auth headers for a user via /token/pair."""
    def _make(client: TestClient, user, password: str = "pw") -> dict[str, str]:
        resp = client.post("/token/pair", json={"email": user.email, "password": password})
        assert resp.status_code == 200, f"Failed to get token for {user.email}: {resp.status_code} {resp.content}"
        access = resp.json()["access"]
        return {"Authorization": f"Bearer {access}"}
    return _make


@pytest.fixture
def make_person(db):
    """Create a user with the given role; owners get their organization from the post_save signal."""
    from accounts.models import Role, User

    def _make(email, role=Role.MEMBER, password="pw", **extra):
        return User.objects.create_user(email=email, password=password, role=role, **extra)
    return _make


@pytest.fixture
def gym(make_person):
    """An owner with their organization, one affiliated staff person and one affiliated member."""
    from accounts.models import Role
    from organizations.models import Affiliation

    owner = make_person("owner@gym.test", Role.OWNER, username="ironworks")
    org = owner.owned_organization
    staff = make_person("coach@gym.test", Role.STAFF, username="coach")
    member = make_person("lifter@gym.test", Role.MEMBER, username="lifter")
    Affiliation.objects.create(person=staff, organization=org, role=Role.STAFF)
    Affiliation.objects.create(person=member, organization=org, role=Role.MEMBER)
    return {"owner": owner, "org": org, "staff": staff, "member": member}
