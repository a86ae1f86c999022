import secrets

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.exceptions import ObjectDoesNotExist
from django.db import models
from django.utils import timezone
from .managers import UserManager
from config.constants import ROLE_CHOICES, DEFAULT_ROLE, ADMIN_ROLE

class User(AbstractBaseUser, PermissionsMixin):
    """Custom User model using email as the unique identifier."""

    email = models.EmailField(unique=True, db_index=True) # Primary unique identifier for login, Index for faster lookups
    is_active = models.BooleanField(default=True) # Determines if the user can log in
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(auto_now_add=True) # Stores when the user registered

    objects = UserManager() # Assign custom UserManager for object creation

    USERNAME_FIELD = "email" # Use email as the unique login field
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email # String representation of the user

    def save(self, *args, **kwargs):
        """Ensure email is always saved in lowercase."""
        self.email = self.email.lower().strip()
        super().save(*args, **kwargs)

    def get_profile(self):
        """Returns the user's Profile, or None if it was never created."""
        try:
            return self.profile
        except ObjectDoesNotExist:
            return None

    def is_admin(self):
        """Returns True if the user's profile carries the admin role."""
        profile = self.get_profile()
        return profile is not None and profile.role == ADMIN_ROLE


class Profile(models.Model):
    """
    Public identity of a user. Shares its primary key with the User row.
    The role is fixed at registration and gates every authorization decision.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name="profile")
    role = models.CharField(
        max_length=20,
        choices=[(role["key"], role["label"]) for role in ROLE_CHOICES],
        default=DEFAULT_ROLE
    )
    full_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "profiles"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.full_name} ({self.role})"


class AdminInvite(models.Model):
    """Single-use code that allows one registration with the admin role."""
    code = models.CharField(max_length=64, unique=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, blank=True, null=True, related_name="issued_invites")
    created_at = models.DateTimeField(auto_now_add=True)
    used_by = models.ForeignKey(User, on_delete=models.SET_NULL, blank=True, null=True, related_name="claimed_invites")
    used_at = models.DateTimeField(blank=True, null=True)

    def __str__(self):
        return f"Invite {self.code[:4]}... ({'used' if self.is_used else 'open'})"

    @property
    def is_used(self):
        return self.used_at is not None

    @classmethod
    def issue(cls, created_by=None):
        return cls.objects.create(code=secrets.token_urlsafe(16), created_by=created_by)

    def claim(self, user):
        self.used_by = user
        self.used_at = timezone.now()
        self.save(update_fields=["used_by", "used_at"])
