from django.db import models
from django.conf import settings

from accounts.models import Role


class Message(models.Model):
    """A chat message in an organization's room. Only ``status`` ever changes, sent -> read."""

    STATUS_SENT = "sent"
    STATUS_READ = "read"
    STATUS_CHOICES = [
        (STATUS_SENT, "Sent"),
        (STATUS_READ, "Read"),
    ]

    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages")
    sender_variant = models.CharField(max_length=10, choices=Role.choices)
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages")
    receiver_variant = models.CharField(max_length=10, choices=Role.choices)
    organization = models.ForeignKey("organizations.Organization", on_delete=models.CASCADE, related_name="messages")
    body = models.TextField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_SENT)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["sender", "receiver", "status"], name="msg_pair_status_idx"),
            models.Index(fields=["organization", "created_at"], name="msg_room_created_idx"),
        ]

    def __str__(self):
        return f"Message({self.sender_id} -> {self.receiver_id}, {self.status})"
