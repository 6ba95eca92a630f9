"""
Celery tasks for derived post content.

Run a worker with:
    celery -A CTFNotes worker -l info
"""

import logging

from bs4 import BeautifulSoup
from celery import shared_task
from django.db import OperationalError

from .content.sanitizer import sanitize

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 225
EXCERPT_LENGTH = 200


def plain_text(html):
    """Visible text of sanitized markup with whitespace collapsed."""
    soup = BeautifulSoup(html or "", "html.parser")
    return " ".join(soup.get_text(separator=" ").split())


def make_excerpt(text, length=EXCERPT_LENGTH):
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(" ", 1)[0] or text[:length]
    return cut.rstrip(" ,.;:") + "…"


def compute_derived_content(markup):
    """Word count, reading time and excerpt computed from sanitized markup."""
    text = plain_text(sanitize(markup))
    word_count = len(text.split())
    return {
        "word_count": word_count,
        "reading_time_minutes": max(1, round(word_count / WORDS_PER_MINUTE + 0.0001)),
        "excerpt": make_excerpt(text),
    }


@shared_task(
    bind=True,
    autoretry_for=(OperationalError,),
    retry_backoff=5,
    retry_kwargs={"max_retries": 3},
)
def update_post_derived_content(self, post_id: int):
    """
    Recompute word count, reading time and excerpt for a Post.

    Called after a Post's content changes. Fields are written with
    ``update()`` so that Post.save() is not re-entered.
    """
    from .models import Post

    try:
        post = Post.objects.get(pk=post_id)
    except Post.DoesNotExist:
        return {"success": False, "error": f"Post {post_id} not found."}

    derived = compute_derived_content(post.content)
    Post.objects.filter(pk=post_id).update(**derived)
    logger.info(
        f"Updated derived content for post {post_id}: "
        f"{derived['word_count']} words, {derived['reading_time_minutes']} min"
    )
    return {"success": True, "post_id": post_id, **derived}
