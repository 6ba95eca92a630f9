"""
Per-day writing activity for the profile page.

Each day in the window gets a post count and a shading level from 0 to 4.
"""

from datetime import date, timedelta

from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone

from .models import Post

ACTIVITY_DAYS = 365

# (minimum count, level), highest first
LEVELS = ((7, 4), (5, 3), (3, 2), (1, 1))


def activity_level(count: int) -> int:
    for minimum, level in LEVELS:
        if count >= minimum:
            return level
    return 0


def post_activity(user, days: int = ACTIVITY_DAYS, today: date | None = None) -> list[dict]:
    """
    Count the user's posts per creation day over the last ``days`` days.

    Private posts count too. Returns one ``{"date", "count", "level"}`` entry
    per day, oldest first, ending with ``today``.
    """
    today = today or timezone.localdate()
    start = today - timedelta(days=days - 1)

    rows = (
        Post.objects.by_author(user)
        .annotate(day=TruncDate("created_at"))
        .filter(day__gte=start, day__lte=today)
        .order_by()
        .values("day")
        .annotate(count=Count("id"))
    )
    counts = {row["day"]: row["count"] for row in rows}

    return [
        {"date": day, "count": counts.get(day, 0), "level": activity_level(counts.get(day, 0))}
        for day in (start + timedelta(days=offset) for offset in range(days))
    ]
