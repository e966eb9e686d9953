from django.contrib import admin
from .models import JoinRequest, MembershipRequest


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "requester", "requester_variant", "organization", "duration", "status", "created_at")
    list_filter = ("status", "requester_variant", "organization")
    search_fields = ("requester__email", "organization__name")
    # Status moves through the lifecycle service only.
    readonly_fields = ("status", "created_at", "updated_at")


@admin.register(MembershipRequest)
class MembershipRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "organization", "duration", "status", "created_at")
    list_filter = ("status", "organization")
    search_fields = ("member__email", "organization__name")
    readonly_fields = ("status", "created_at", "updated_at")
