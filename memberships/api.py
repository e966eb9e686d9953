from typing import List
from ninja import Router
from ninja.pagination import LimitOffsetPagination, paginate
from ninja_jwt.authentication import JWTAuth
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404

from core.utils.auth_utils import get_org_or_404, get_request_user
from memberships import services
from memberships.schemas import (
    AffiliationOut,
    DetailResponse,
    ErrorResponse,
    JoinRequestIn,
    JoinRequestOut,
    MembershipActionIn,
    MembershipRequestIn,
    MembershipRequestOut,
    MembershipUpdateIn,
)

router = Router(tags=["memberships"])
User = get_user_model()

ERRORS = {400: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse}


# Join requests

@router.post("/orgs/{org_slug}/join-requests/", response={201: JoinRequestOut, **ERRORS}, auth=JWTAuth())
def submit_join_request(request, org_slug: str, data: JoinRequestIn):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    join_request = services.submit_join_request(user, org, data.duration)
    return 201, join_request


@router.get("/orgs/{org_slug}/join-requests/", response=List[JoinRequestOut], auth=JWTAuth())
@paginate(LimitOffsetPagination)
def list_join_requests(request, org_slug: str):
    """Pending join requests in arrival order. Staff reviewers only see member requests."""
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    return services.pending_join_requests(org, user)


@router.post("/join-requests/{request_id}/accept/", response={200: JoinRequestOut, **ERRORS}, auth=JWTAuth())
def accept_join_request(request, request_id: int):
    user = get_request_user(request)
    return services.resolve_join_request(request_id, user, services.ACCEPT)


@router.post("/join-requests/{request_id}/deny/", response={200: JoinRequestOut, **ERRORS}, auth=JWTAuth())
def deny_join_request(request, request_id: int):
    user = get_request_user(request)
    return services.resolve_join_request(request_id, user, services.DENY)


# Affiliates

@router.get("/orgs/{org_slug}/members/", response=List[AffiliationOut], auth=JWTAuth())
@paginate(LimitOffsetPagination)
def list_members(request, org_slug: str):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    return services.member_affiliations(org, user)


@router.get("/orgs/{org_slug}/staff/", response=List[AffiliationOut], auth=JWTAuth())
@paginate(LimitOffsetPagination)
def list_staff(request, org_slug: str):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    return services.staff_affiliations(org, user)


@router.delete("/orgs/{org_slug}/affiliates/{person_id}/", response={200: DetailResponse, **ERRORS}, auth=JWTAuth())
def remove_affiliate(request, org_slug: str, person_id: int):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    person = get_object_or_404(User, pk=person_id)
    role = services.remove_affiliate(org, person, actor=user)
    return DetailResponse(detail=f"{role.capitalize()} removed successfully")


@router.put("/orgs/{org_slug}/members/{person_id}/membership/", response={200: AffiliationOut, **ERRORS}, auth=JWTAuth())
def update_membership(request, org_slug: str, person_id: int, data: MembershipUpdateIn):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    member = get_object_or_404(User, pk=person_id)
    return services.set_membership_directly(org, member, data.duration, actor=user)


# Membership-duration requests

@router.post("/orgs/{org_slug}/membership-requests/", response={201: MembershipRequestOut, **ERRORS}, auth=JWTAuth())
def submit_membership_request(request, org_slug: str, data: MembershipRequestIn):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    membership_request = services.submit_membership_request(user, org, data.duration)
    return 201, membership_request


@router.get("/orgs/{org_slug}/membership-requests/", response=List[MembershipRequestOut], auth=JWTAuth())
@paginate(LimitOffsetPagination)
def list_membership_requests(request, org_slug: str):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    return services.membership_requests(org, user)


@router.post("/membership-requests/{request_id}/action/", response={200: MembershipRequestOut, **ERRORS}, auth=JWTAuth())
def act_on_membership_request(request, request_id: int, data: MembershipActionIn):
    user = get_request_user(request)
    return services.resolve_membership_request(request_id, user, data.action)
