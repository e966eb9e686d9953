from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.contrib.auth import get_user_model
from django.core.cache import cache
from accounts.models import Role
from organizations.models import Organization, Affiliation
from organizations.permissions import affiliation_cache_keys
from core.utils import make_it_unique

User = get_user_model()


@receiver(post_save, sender=User)
def create_organization_on_owner_create(sender, instance, created, **kwargs):
    if created and instance.role == Role.OWNER:
        if not Organization.objects.filter(owner=instance).exists():
            base_slug = instance.slug or f"org-{instance.pk}"
            slug = make_it_unique(base_slug, Organization, "slug")
            Organization.objects.create(
                name=instance.username or f"org-{instance.pk}",
                slug=slug,
                owner=instance,
            )


@receiver([post_save, post_delete], sender=Affiliation)
def invalidate_affiliation_cache(sender, instance, **kwargs):
    keys = affiliation_cache_keys(instance.person_id, instance.organization_id)
    cache.delete_many(keys)
    # Readers inside other transactions may re-cache the old value before commit.
    transaction.on_commit(lambda: cache.delete_many(keys))
