from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.utils.text import slugify
from core.utils import make_it_unique
import string


class Role(models.TextChoices):
    OWNER = "owner", "Owner"
    STAFF = "staff", "Staff"
    MEMBER = "member", "Member"


# Variants that may affiliate with an organization through a join request.
AFFILIATING_ROLES = (Role.STAFF, Role.MEMBER)


class UserManager(BaseUserManager):
    def _clean_username(self, username):
        # Allow only alphanumerics, dots, and underscores
        allowed = set(string.ascii_letters + string.digits + '._')
        return ''.join(c for c in username if c in allowed)

    def _generate_username(self, email):
        base_username = self._clean_username(email.split('@')[0])
        return make_it_unique(base_username, self.model, "username")

    def _generate_slug(self, username):
        base_slug = slugify(username)
        return make_it_unique(base_slug, self.model, "slug")

    def create_user(self, email, password=None, role=Role.MEMBER, **extra_fields):
        if not email:
            raise ValueError("The Email field must be set")
        if role not in Role.values:
            raise ValueError(f"Unknown role: {role}")
        email = self.normalize_email(email)
        if not extra_fields.get("username"):
            extra_fields["username"] = self._generate_username(email)
        if not extra_fields.get("slug"):
            extra_fields["slug"] = self._generate_slug(extra_fields["username"])
        user = self.model(email=email, role=role, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, password, role=Role.OWNER, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """A person. ``role`` is the variant the identity layer hands to every call."""

    email = models.EmailField(unique=True)
    username = models.CharField(max_length=50, unique=True, blank=True)
    slug = models.SlugField(unique=True, blank=True)
    first_name = models.CharField(max_length=50, blank=True)
    last_name = models.CharField(max_length=50, blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.MEMBER)
    is_active = models.BooleanField(default=True)
    # Django admin-site access, unrelated to the gym staff role.
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login = models.DateTimeField(null=True, blank=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    @property
    def display_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username

    def __str__(self):
        return self.email
