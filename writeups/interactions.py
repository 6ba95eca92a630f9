"""
Likes, bookmarks and comments.

A toggle is a command with a result: ``ToggleResult.ok`` says whether it went
through, and ``active``/``count`` always describe the stored state. When a
toggle fails the result carries the snapshot taken before the attempt, so the
caller can put its optimistic UI state back exactly as it was.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction

from .models import Bookmark, Comment, Like

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    ok: bool
    active: bool
    count: int
    error: str | None = None

    def as_dict(self):
        data = {"ok": self.ok, "active": self.active, "count": self.count}
        if self.error:
            data["error"] = self.error
        return data


def _snapshot(model, user, post):
    active = bool(
        user is not None
        and user.is_authenticated
        and model.objects.filter(user=user, post=post).exists()
    )
    return active, model.objects.filter(post=post).count()


def _toggle(model, user, post):
    active, count = _snapshot(model, user, post)
    if user is None or not user.is_authenticated:
        return ToggleResult(ok=False, active=active, count=count, error="Login required")

    try:
        with transaction.atomic():
            deleted, _ = model.objects.filter(user=user, post=post).delete()
            if not deleted:
                model.objects.create(user=user, post=post)
    except DatabaseError as e:
        logger.warning(
            f"{model.__name__} toggle failed for user {user.pk} on post {post.pk}, rolling back: {e}"
        )
        return ToggleResult(ok=False, active=active, count=count, error=f"Could not update {model.__name__.lower()}")

    active, count = _snapshot(model, user, post)
    return ToggleResult(ok=True, active=active, count=count)


def toggle_like(user, post) -> ToggleResult:
    return _toggle(Like, user, post)


def toggle_bookmark(user, post) -> ToggleResult:
    return _toggle(Bookmark, user, post)


def like_state(user, post) -> ToggleResult:
    active, count = _snapshot(Like, user, post)
    return ToggleResult(ok=True, active=active, count=count)


def bookmark_state(user, post) -> ToggleResult:
    active, count = _snapshot(Bookmark, user, post)
    return ToggleResult(ok=True, active=active, count=count)


def add_comment(user, post, content):
    """Create a comment; blank content is rejected with ``ValueError``."""
    content = (content or "").strip()
    if not content:
        raise ValueError("Comment cannot be empty")
    return Comment.objects.create(post=post, author=user, content=content)


def delete_comment(user, comment) -> bool:
    """Authors may delete their own comments."""
    if user is None or not user.is_authenticated or comment.author_id != user.pk:
        return False
    comment.delete()
    return True
