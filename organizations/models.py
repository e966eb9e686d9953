from django.db import models
from django.db.models import F, Q
from django.conf import settings

from accounts.models import Role
from memberships.durations import DurationCode, Membership


class Organization(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(unique=True)
    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="owned_organization",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def staff(self):
        return self.affiliations.filter(role=Role.STAFF)

    @property
    def members(self):
        return self.affiliations.filter(role=Role.MEMBER)

    @property
    def pending_join_requests(self):
        # Arrival order, display only.
        return self.join_requests.filter(status="pending").order_by("created_at", "id")

    def __str__(self):
        return self.name


class Affiliation(models.Model):
    """A person's current link to an organization. One per person, system-wide."""

    ROLE_CHOICES = [
        (Role.STAFF, "Staff"),
        (Role.MEMBER, "Member"),
    ]
    person = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="affiliation")
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="affiliations")
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    membership_duration = models.CharField(max_length=10, choices=DurationCode.choices, null=True, blank=True)
    membership_start = models.DateTimeField(null=True, blank=True)
    membership_end = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(membership_end__isnull=True) | Q(membership_end__gt=F("membership_start")),
                name="membership_end_after_start",
            ),
        ]

    @property
    def membership(self):
        if not self.membership_duration:
            return None
        return Membership(
            duration=self.membership_duration,
            start_date=self.membership_start,
            end_date=self.membership_end,
        )

    def apply_membership(self, membership):
        self.membership_duration = membership.duration if membership else None
        self.membership_start = membership.start_date if membership else None
        self.membership_end = membership.end_date if membership else None

    def __str__(self):
        return f"{self.person.email} in {self.organization.name} as {self.role}"
