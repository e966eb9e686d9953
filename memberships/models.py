from django.db import models
from django.db.models import Q
from django.conf import settings

from accounts.models import Role
from memberships.durations import DurationCode


class JoinRequest(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_DENIED = "denied"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_DENIED, "Denied"),
    ]
    REQUESTER_VARIANT_CHOICES = [
        (Role.STAFF, "Staff"),
        (Role.MEMBER, "Member"),
    ]

    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="join_requests")
    requester_variant = models.CharField(max_length=10, choices=REQUESTER_VARIANT_CHOICES)
    organization = models.ForeignKey("organizations.Organization", on_delete=models.CASCADE, related_name="join_requests")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    # Required iff the requester is a member.
    duration = models.CharField(max_length=10, choices=DurationCode.choices, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["requester", "organization"],
                condition=Q(status="pending"),
                name="uniq_pending_join_request",
            ),
        ]

    @property
    def is_terminal(self):
        return self.status != self.STATUS_PENDING

    def __str__(self):
        return f"JoinRequest({self.requester_id} -> {self.organization_id}, {self.status})"


class MembershipRequest(models.Model):
    """An affiliated member asking for a new membership duration."""

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_DENIED = "denied"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_DENIED, "Denied"),
    ]

    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="membership_requests")
    organization = models.ForeignKey("organizations.Organization", on_delete=models.CASCADE, related_name="membership_requests")
    duration = models.CharField(max_length=10, choices=DurationCode.choices)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["member", "organization", "status"], name="mreq_member_org_status_idx"),
        ]

    def __str__(self):
        return f"MembershipRequest({self.member_id} @ {self.organization_id}, {self.duration}, {self.status})"
