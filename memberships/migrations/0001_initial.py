import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


DURATION_CHOICES = [
    ("1 week", "1 week"),
    ("1 month", "1 month"),
    ("3 months", "3 months"),
    ("6 months", "6 months"),
    ("1 year", "1 year"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="JoinRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("requester_variant", models.CharField(choices=[("staff", "Staff"), ("member", "Member")], max_length=10)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("accepted", "Accepted"), ("denied", "Denied")], default="pending", max_length=10)),
                ("duration", models.CharField(blank=True, choices=DURATION_CHOICES, max_length=10, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("organization", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="join_requests", to="organizations.organization")),
                ("requester", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="join_requests", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "pending")), fields=("requester", "organization"), name="uniq_pending_join_request"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MembershipRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("duration", models.CharField(choices=DURATION_CHOICES, max_length=10)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("denied", "Denied")], default="pending", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="membership_requests", to=settings.AUTH_USER_MODEL)),
                ("organization", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="membership_requests", to="organizations.organization")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["member", "organization", "status"], name="mreq_member_org_status_idx"),
                ],
            },
        ),
    ]
