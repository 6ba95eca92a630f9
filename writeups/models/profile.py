from django.conf import settings
from django.db import models

from .base import TimeStampedModel


class Profile(TimeStampedModel):
    """Public profile of a user, created with the account."""

    class Role(models.TextChoices):
        USER = "user", "User"
        MANAGER = "manager", "Manager"
        ADMIN = "admin", "Admin"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile"
    )
    username = models.CharField(max_length=150, blank=True)
    avatar_url = models.URLField(blank=True)
    role = models.CharField(max_length=12, choices=Role.choices, default=Role.USER)

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        return self.username or self.user.get_username()
