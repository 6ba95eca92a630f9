"""
Signal handlers for the writeups app.

Creates a Profile for every new user account.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from writeups.models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    """
    Create the user's Profile when the account is created.

    Args:
        sender: The user model class
        instance: The user being saved
        created: Boolean indicating if this is a new user
        **kwargs: Additional keyword arguments
    """
    if not created or kwargs.get("raw"):
        return

    profile, was_created = Profile.objects.get_or_create(
        user=instance, defaults={"username": instance.get_username()}
    )
    if was_created:
        logger.debug(f"Created profile for user '{profile.username}'")
