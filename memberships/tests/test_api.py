import pytest

from accounts.models import Role
from memberships.models import JoinRequest, MembershipRequest
from organizations.models import Affiliation


@pytest.fixture
def applicant(make_person):
    return make_person("newbie@gym.test", Role.MEMBER, username="newbie")


@pytest.mark.django_db
def test_submit_and_accept_join_request(api_client, make_auth_headers, gym, applicant):
    slug = gym["org"].slug
    resp = api_client.post(
        f"/orgs/{slug}/join-requests/", json={"duration": "1 month"},
        headers=make_auth_headers(api_client, applicant),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["requester"]["id"] == applicant.id
    assert body["organization"] == gym["org"].id

    staff_headers = make_auth_headers(api_client, gym["staff"])
    listing = api_client.get(f"/orgs/{slug}/join-requests/", headers=staff_headers)
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()["items"]] == [body["id"]]

    accepted = api_client.post(f"/join-requests/{body['id']}/accept/", headers=staff_headers)
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert Affiliation.objects.get(person=applicant).organization == gym["org"]

    again = api_client.post(f"/join-requests/{body['id']}/deny/", headers=staff_headers)
    assert again.status_code == 404
    assert again.json() == {"detail": "Request not found or already processed", "code": "not_found"}


@pytest.mark.django_db
def test_join_request_errors(api_client, make_auth_headers, gym, applicant):
    slug = gym["org"].slug
    headers = make_auth_headers(api_client, applicant)

    missing = api_client.post(f"/orgs/{slug}/join-requests/", json={}, headers=headers)
    assert missing.status_code == 400
    assert missing.json()["code"] == "missing_duration"

    invalid = api_client.post(f"/orgs/{slug}/join-requests/", json={"duration": "10 years"}, headers=headers)
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "invalid_duration"

    assert api_client.post(f"/orgs/{slug}/join-requests/", json={"duration": "1 week"}, headers=headers).status_code == 201
    duplicate = api_client.post(f"/orgs/{slug}/join-requests/", json={"duration": "1 week"}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "duplicate_pending"

    member_headers = make_auth_headers(api_client, gym["member"])
    affiliated = api_client.post(f"/orgs/{slug}/join-requests/", json={"duration": "1 week"}, headers=member_headers)
    assert affiliated.status_code == 409
    assert affiliated.json()["code"] == "already_affiliated"

    unknown_org = api_client.post("/orgs/nope/join-requests/", json={"duration": "1 week"}, headers=headers)
    assert unknown_org.status_code == 404


@pytest.mark.django_db
def test_member_cannot_review(api_client, make_auth_headers, gym, applicant):
    slug = gym["org"].slug
    api_client.post(f"/orgs/{slug}/join-requests/", json={"duration": "1 month"}, headers=make_auth_headers(api_client, applicant))
    join_request = JoinRequest.objects.get(requester=applicant)
    member_headers = make_auth_headers(api_client, gym["member"])

    assert api_client.get(f"/orgs/{slug}/join-requests/", headers=member_headers).status_code == 403
    resp = api_client.post(f"/join-requests/{join_request.id}/accept/", headers=member_headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


@pytest.mark.django_db
def test_staff_cannot_accept_staff(api_client, make_auth_headers, gym, make_person):
    coach = make_person("second-coach@gym.test", Role.STAFF)
    slug = gym["org"].slug
    resp = api_client.post(f"/orgs/{slug}/join-requests/", json={}, headers=make_auth_headers(api_client, coach))
    assert resp.status_code == 201
    assert resp.json()["duration"] is None

    denied = api_client.post(
        f"/join-requests/{resp.json()['id']}/accept/", headers=make_auth_headers(api_client, gym["staff"])
    )
    assert denied.status_code == 403
    assert denied.json()["detail"] == "Staff can only manage member requests"


@pytest.mark.django_db
def test_roster_endpoints(api_client, make_auth_headers, gym):
    slug = gym["org"].slug
    owner_headers = make_auth_headers(api_client, gym["owner"])
    staff_headers = make_auth_headers(api_client, gym["staff"])

    members = api_client.get(f"/orgs/{slug}/members/", headers=staff_headers)
    assert members.status_code == 200
    assert [item["person"]["id"] for item in members.json()["items"]] == [gym["member"].id]

    assert api_client.get(f"/orgs/{slug}/staff/", headers=staff_headers).status_code == 403
    staff = api_client.get(f"/orgs/{slug}/staff/", headers=owner_headers)
    assert [item["person"]["id"] for item in staff.json()["items"]] == [gym["staff"].id]


@pytest.mark.django_db
def test_remove_affiliate(api_client, make_auth_headers, gym):
    slug = gym["org"].slug
    resp = api_client.delete(
        f"/orgs/{slug}/affiliates/{gym['member'].id}/", headers=make_auth_headers(api_client, gym["owner"])
    )
    assert resp.status_code == 200
    assert resp.json() == {"detail": "Member removed successfully"}
    assert not Affiliation.objects.filter(person=gym["member"]).exists()

    forbidden = api_client.delete(
        f"/orgs/{slug}/affiliates/{gym['owner'].id}/", headers=make_auth_headers(api_client, gym["staff"])
    )
    assert forbidden.status_code == 403


@pytest.mark.django_db
def test_membership_request_flow(api_client, make_auth_headers, gym):
    slug = gym["org"].slug
    member_headers = make_auth_headers(api_client, gym["member"])
    staff_headers = make_auth_headers(api_client, gym["staff"])

    created = api_client.post(f"/orgs/{slug}/membership-requests/", json={"duration": "1 year"}, headers=member_headers)
    assert created.status_code == 201
    request_id = created.json()["id"]

    listing = api_client.get(f"/orgs/{slug}/membership-requests/", headers=staff_headers)
    assert [item["id"] for item in listing.json()["items"]] == [request_id]

    bad_action = api_client.post(f"/membership-requests/{request_id}/action/", json={"action": "maybe"}, headers=staff_headers)
    assert bad_action.status_code == 400
    assert bad_action.json()["detail"] == "Action (approve or deny) is required"

    approved = api_client.post(f"/membership-requests/{request_id}/action/", json={"action": "approve"}, headers=staff_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert Affiliation.objects.get(person=gym["member"]).membership_duration == "1 year"

    again = api_client.post(f"/membership-requests/{request_id}/action/", json={"action": "deny"}, headers=staff_headers)
    assert again.status_code == 409
    assert again.json()["code"] == "already_resolved"


@pytest.mark.django_db
def test_update_membership_directly(api_client, make_auth_headers, gym):
    slug = gym["org"].slug
    pending = MembershipRequest.objects.create(member=gym["member"], organization=gym["org"], duration="3 months")
    resp = api_client.put(
        f"/orgs/{slug}/members/{gym['member'].id}/membership/",
        json={"duration": "3 months"},
        headers=make_auth_headers(api_client, gym["owner"]),
    )
    assert resp.status_code == 200
    assert resp.json()["membership"]["duration"] == "3 months"
    pending.refresh_from_db()
    assert pending.status == MembershipRequest.STATUS_APPROVED


@pytest.mark.django_db
def test_me_reports_affiliation(api_client, make_auth_headers, gym):
    resp = api_client.get("/auth/me", headers=make_auth_headers(api_client, gym["member"]))
    assert resp.status_code == 200
    data = resp.json()
    assert data["role"] == "member"
    assert data["organization_id"] == gym["org"].id
    assert data["organization_slug"] == gym["org"].slug
    assert data["membership"] is None

    owner = api_client.get("/auth/me", headers=make_auth_headers(api_client, gym["owner"]))
    assert owner.json()["organization_id"] == gym["org"].id
