import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


ROLE_CHOICES = [("owner", "Owner"), ("staff", "Staff"), ("member", "Member")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Message",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sender_variant", models.CharField(choices=ROLE_CHOICES, max_length=10)),
                ("receiver_variant", models.CharField(choices=ROLE_CHOICES, max_length=10)),
                ("body", models.TextField()),
                ("status", models.CharField(choices=[("sent", "Sent"), ("read", "Read")], default="sent", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("organization", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="messages", to="organizations.organization")),
                ("receiver", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="received_messages", to=settings.AUTH_USER_MODEL)),
                ("sender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sent_messages", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["sender", "receiver", "status"], name="msg_pair_status_idx"),
                    models.Index(fields=["organization", "created_at"], name="msg_room_created_idx"),
                ],
            },
        ),
    ]
