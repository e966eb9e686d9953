"""
Membership lifecycle: join requests, membership-duration requests and the
affiliation changes they cause.

Every multi-write transition runs inside one ``transaction.atomic()`` block. The
pending -> terminal step is a conditional UPDATE on ``status='pending'`` so that,
of two reviewers racing on the same request, exactly one claims it and the other
observes the terminal state. Audit records are emitted after commit.
"""
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.identity import get_identity
from accounts.models import AFFILIATING_ROLES, Role
from core import audit
from core.errors import (
    AlreadyAffiliated,
    AlreadyResolved,
    AuthorizationError,
    DuplicatePending,
    NotAffiliated,
    NotFoundError,
    ValidationError,
)
from memberships.durations import compute_membership, parse_duration
from memberships.models import JoinRequest, MembershipRequest
from organizations import permissions
from organizations.models import Affiliation

ACCEPT = "accept"
DENY = "deny"
APPROVE = "approve"

JOIN_DECISIONS = {
    ACCEPT: JoinRequest.STATUS_ACCEPTED,
    DENY: JoinRequest.STATUS_DENIED,
}
MEMBERSHIP_DECISIONS = {
    APPROVE: MembershipRequest.STATUS_APPROVED,
    DENY: MembershipRequest.STATUS_DENIED,
}


def _authorize(operation, actor, organization_id, requester_variant=None):
    identity = get_identity(actor)
    permissions.check_capability(
        operation, identity.variant, identity.organization_id, organization_id, requester_variant
    )
    return identity


def _label(variant):
    return str(variant).capitalize()


# Join requests

def submit_join_request(requester, organization, duration=None):
    if requester.role not in AFFILIATING_ROLES:
        raise AuthorizationError("Only members and staff can request to join an organization")

    with transaction.atomic():
        # Lock the person row so concurrent submissions by one person serialise.
        get_user_model().objects.select_for_update().filter(pk=requester.pk).first()
        if Affiliation.objects.filter(person_id=requester.pk).exists():
            raise AlreadyAffiliated()
        if JoinRequest.objects.filter(
            requester_id=requester.pk,
            organization=organization,
            status=JoinRequest.STATUS_PENDING,
        ).exists():
            raise DuplicatePending()
        code = parse_duration(duration) if requester.role == Role.MEMBER else None
        try:
            with transaction.atomic():
                join_request = JoinRequest.objects.create(
                    requester=requester,
                    requester_variant=requester.role,
                    organization=organization,
                    duration=code,
                )
        except IntegrityError:
            raise DuplicatePending()

    audit.emit(
        "join_request_submitted", requester, organization,
        f"{_label(requester.role)} sent join request to {organization.name}",
    )
    return join_request


def _affiliate(join_request, now):
    if Affiliation.objects.filter(person_id=join_request.requester_id).exists():
        raise AlreadyAffiliated("Requester already belongs to an organization")
    affiliation = Affiliation(
        person_id=join_request.requester_id,
        organization_id=join_request.organization_id,
        role=join_request.requester_variant,
    )
    if join_request.requester_variant == Role.MEMBER:
        affiliation.apply_membership(compute_membership(join_request.duration, start=now))
    try:
        with transaction.atomic():
            affiliation.save()
    except IntegrityError:
        raise AlreadyAffiliated("Requester already belongs to an organization")
    return affiliation


def resolve_join_request(request_id, reviewer, decision):
    """Accept or deny a pending join request.

    Accepting sets the request status, creates the requester's affiliation and, for
    members, attaches a membership starting now. Either all of it commits or none.
    """
    if decision not in JOIN_DECISIONS:
        raise ValidationError("Decision must be accept or deny")
    new_status = JOIN_DECISIONS[decision]
    now = timezone.now()

    with transaction.atomic():
        join_request = (
            JoinRequest.objects.select_for_update()
            .select_related("requester", "organization")
            .filter(pk=request_id)
            .first()
        )
        if join_request is None or join_request.is_terminal:
            raise NotFoundError("Request not found or already processed")
        identity = _authorize(
            permissions.RESOLVE_JOIN_REQUEST, reviewer,
            join_request.organization_id, join_request.requester_variant,
        )
        claimed = JoinRequest.objects.filter(
            pk=join_request.pk, status=JoinRequest.STATUS_PENDING
        ).update(status=new_status, updated_at=now)
        if not claimed:
            raise NotFoundError("Request not found or already processed")
        join_request.status = new_status
        join_request.updated_at = now
        if new_status == JoinRequest.STATUS_ACCEPTED:
            _affiliate(join_request, now)

    audit.emit(
        f"join_request_{new_status}", reviewer, join_request.organization,
        f"{_label(identity.variant)} {new_status} join request from "
        f"{_label(join_request.requester_variant)} {join_request.requester.display_name}",
    )
    return join_request


def pending_join_requests(organization, reviewer):
    """Pending join requests in arrival order. Staff only see member requests."""
    identity = _authorize(permissions.LIST_JOIN_REQUESTS, reviewer, organization.id)
    qs = organization.pending_join_requests.select_related("requester")
    if identity.variant == Role.STAFF:
        qs = qs.filter(requester_variant=Role.MEMBER)
    return qs


# Affiliates

def remove_affiliate(organization, person, *, actor):
    """Detach ``person`` from ``organization`` and drop their open duration requests."""
    _authorize(permissions.REMOVE_AFFILIATE, actor, organization.id)

    with transaction.atomic():
        affiliation = (
            Affiliation.objects.select_for_update()
            .filter(person_id=person.pk, organization=organization)
            .first()
        )
        if affiliation is None:
            raise NotFoundError("Person not found or not in this organization")
        MembershipRequest.objects.filter(
            member_id=person.pk,
            organization=organization,
            status=MembershipRequest.STATUS_PENDING,
        ).delete()
        role = affiliation.role
        affiliation.delete()

    audit.emit(
        f"{role}_removed", actor, organization,
        f"Owner removed {role} {person.display_name}",
    )
    return role


def member_affiliations(organization, reviewer):
    _authorize(permissions.LIST_MEMBERS, reviewer, organization.id)
    return organization.members.select_related("person").order_by("person__username")


def staff_affiliations(organization, reviewer):
    _authorize(permissions.LIST_STAFF, reviewer, organization.id)
    return organization.staff.select_related("person").order_by("person__username")


# Membership-duration requests

def submit_membership_request(member, organization, duration):
    if member.role != Role.MEMBER:
        raise AuthorizationError("Only members can request a membership change")
    if not Affiliation.objects.filter(person_id=member.pk, organization=organization).exists():
        raise NotAffiliated()
    code = parse_duration(duration)
    membership_request = MembershipRequest.objects.create(
        member=member,
        organization=organization,
        duration=code,
    )
    audit.emit(
        "membership_request_submitted", member, organization,
        f"Member {member.display_name} requested a {code.value} membership",
    )
    return membership_request


def resolve_membership_request(request_id, reviewer, decision):
    if decision not in MEMBERSHIP_DECISIONS:
        raise ValidationError("Action (approve or deny) is required")
    new_status = MEMBERSHIP_DECISIONS[decision]
    now = timezone.now()

    with transaction.atomic():
        membership_request = (
            MembershipRequest.objects.select_for_update()
            .select_related("member", "organization")
            .filter(pk=request_id)
            .first()
        )
        if membership_request is None:
            raise NotFoundError("Membership request not found")
        identity = _authorize(
            permissions.RESOLVE_MEMBERSHIP_REQUEST, reviewer,
            membership_request.organization_id, Role.MEMBER,
        )
        if membership_request.status != MembershipRequest.STATUS_PENDING:
            raise AlreadyResolved()
        claimed = MembershipRequest.objects.filter(
            pk=membership_request.pk, status=MembershipRequest.STATUS_PENDING
        ).update(status=new_status, updated_at=now)
        if not claimed:
            raise AlreadyResolved()
        membership_request.status = new_status
        membership_request.updated_at = now

        if new_status == MembershipRequest.STATUS_APPROVED:
            affiliation = (
                Affiliation.objects.select_for_update()
                .filter(
                    person_id=membership_request.member_id,
                    organization_id=membership_request.organization_id,
                    role=Role.MEMBER,
                )
                .first()
            )
            if affiliation is None:
                raise NotFoundError("Member not found or not in this organization")
            affiliation.apply_membership(compute_membership(membership_request.duration, start=now))
            affiliation.save()

    audit.emit(
        f"membership_request_{new_status}", reviewer, membership_request.organization,
        f"{_label(identity.variant)} {new_status} membership request for member "
        f"{membership_request.member.display_name}",
    )
    return membership_request


def membership_requests(organization, reviewer):
    """All duration requests of the organization, newest first."""
    _authorize(permissions.LIST_MEMBERSHIP_REQUESTS, reviewer, organization.id)
    return organization.membership_requests.select_related("member").order_by("-created_at", "-id")


def set_membership_directly(organization, member, duration, *, actor):
    """Overwrite a member's membership without going through a request.

    A pending request from the same member for the same duration is considered
    satisfied and marked approved, unless MEMBERSHIP_DIRECT_SET_APPROVES_REQUESTS
    is turned off.
    """
    code = parse_duration(duration)
    identity = _authorize(permissions.SET_MEMBERSHIP, actor, organization.id, Role.MEMBER)
    now = timezone.now()

    with transaction.atomic():
        affiliation = (
            Affiliation.objects.select_for_update()
            .select_related("person")
            .filter(person_id=member.pk, organization=organization, role=Role.MEMBER)
            .first()
        )
        if affiliation is None:
            raise NotFoundError("Member not found or not in this organization")
        affiliation.apply_membership(compute_membership(code, start=now))
        affiliation.save()
        if getattr(settings, "MEMBERSHIP_DIRECT_SET_APPROVES_REQUESTS", True):
            MembershipRequest.objects.filter(
                member_id=member.pk,
                organization=organization,
                status=MembershipRequest.STATUS_PENDING,
                duration=code,
            ).update(status=MembershipRequest.STATUS_APPROVED, updated_at=now)

    audit.emit(
        "membership_updated", actor, organization,
        f"{_label(identity.variant)} updated membership for member "
        f"{affiliation.person.display_name} to {code.value}",
    )
    return affiliation
