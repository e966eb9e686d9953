import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="owned_organization", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="Affiliation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("staff", "Staff"), ("member", "Member")], max_length=10)),
                ("membership_duration", models.CharField(blank=True, choices=[("1 week", "1 week"), ("1 month", "1 month"), ("3 months", "3 months"), ("6 months", "6 months"), ("1 year", "1 year")], max_length=10, null=True)),
                ("membership_start", models.DateTimeField(blank=True, null=True)),
                ("membership_end", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("organization", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="affiliations", to="organizations.organization")),
                ("person", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="affiliation", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("membership_end__isnull", True), ("membership_end__gt", models.F("membership_start")), _connector="OR"),
                        name="membership_end_after_start",
                    ),
                ],
            },
        ),
    ]
