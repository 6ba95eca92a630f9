"""
Reader interactions with posts: comments, likes and bookmarks.
"""

from django.conf import settings
from django.db import models

from .base import TimeStampedModel


class Comment(TimeStampedModel):
    post = models.ForeignKey("writeups.Post", on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="writeup_comments"
    )
    content = models.TextField()

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"Comment by {self.author} on {self.post}"


class Like(TimeStampedModel):
    post = models.ForeignKey("writeups.Post", on_delete=models.CASCADE, related_name="likes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="writeup_likes"
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="unique_like_per_user"),
        ]


class Bookmark(TimeStampedModel):
    post = models.ForeignKey("writeups.Post", on_delete=models.CASCADE, related_name="bookmarks")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="writeup_bookmarks"
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="unique_bookmark_per_user"),
        ]
