from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "organization", "sender", "receiver", "status", "created_at")
    list_filter = ("status", "organization")
    search_fields = ("body", "sender__email", "receiver__email")

    def has_add_permission(self, request):
        return False
