"""
Models for the writeups app.

This package contains all model definitions organized by domain:
- base: TimeStampedModel
- taxonomy: Tag, Category
- post: Post (with queryset/manager)
- interactions: Comment, Like, Bookmark
- profile: Profile
"""

from .base import TimeStampedModel
from .interactions import Bookmark, Comment, Like
from .post import STUDY_TAG, Post, PostManager, PostQuerySet
from .profile import Profile
from .taxonomy import Category, Tag, TagManager

__all__ = [
    "TimeStampedModel",
    "Tag",
    "TagManager",
    "Category",
    "Post",
    "PostQuerySet",
    "PostManager",
    "STUDY_TAG",
    "Comment",
    "Like",
    "Bookmark",
    "Profile",
]
