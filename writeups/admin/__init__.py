"""
Django admin configuration for the writeups app.

This package contains modular admin classes organized by functionality:
- taxonomy: Tag and Category admins
- post: Post admin with derived-content and visibility actions
- community: Comment, Like, Bookmark and Profile admins

All admin classes are registered via @admin.register() decorators in their
respective modules.
"""

from django.conf import settings
from django.contrib import admin

# Customize admin site
admin.site.site_header = getattr(settings, "ADMIN_SITE_HEADER", "Django Administration")
admin.site.site_title = getattr(settings, "ADMIN_SITE_TITLE", "Django site admin")
admin.site.index_title = getattr(settings, "ADMIN_INDEX_TITLE", "Site administration")

from .community import BookmarkAdmin, CommentAdmin, LikeAdmin, ProfileAdmin  # noqa: E402
from .post import PostAdmin  # noqa: E402
from .taxonomy import CategoryAdmin, TagAdmin  # noqa: E402

__all__ = [
    "TagAdmin",
    "CategoryAdmin",
    "PostAdmin",
    "CommentAdmin",
    "LikeAdmin",
    "BookmarkAdmin",
    "ProfileAdmin",
]
