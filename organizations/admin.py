from django.contrib import admin
from .models import Affiliation, Organization


class AffiliationInline(admin.TabularInline):
    model = Affiliation
    extra = 0
    fields = ("person", "role", "membership_duration", "membership_start", "membership_end")
    raw_id_fields = ("person",)


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "owner", "created_at")
    search_fields = ("name", "slug", "owner__email")
    inlines = [AffiliationInline]


@admin.register(Affiliation)
class AffiliationAdmin(admin.ModelAdmin):
    list_display = ("id", "person", "organization", "role", "membership_duration", "membership_end")
    list_filter = ("role", "organization")
    search_fields = ("person__email", "person__username")
    raw_id_fields = ("person",)
