from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    email = models.EmailField(unique=True)
    joined_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.email or self.username


class Profile(models.Model):
    # identity is shared with the auth user
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        primary_key=True,
        related_name="profile",
        on_delete=models.CASCADE,
    )
    full_name = models.CharField(max_length=150, blank=True)
    bio = models.TextField(blank=True)
    avatar_url = models.URLField(blank=True)
    onboarding_answers = models.JSONField(blank=True, null=True)
    onboarding_completed = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.full_name or str(self.user)

    @property
    def display_name(self):
        return self.full_name or "Anonymous"


class UserRole(models.Model):
    ADMIN = "admin"
    USER = "user"
    ROLE_CHOICES = [
        (ADMIN, "Admin"),
        (USER, "User"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="roles", on_delete=models.CASCADE)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=USER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="unique_user_role")
        ]

    def __str__(self):
        return f"{self.user} ({self.role})"


def is_admin(user):
    if not user.is_authenticated:
        return False
    return UserRole.objects.filter(user=user, role=UserRole.ADMIN).exists()
