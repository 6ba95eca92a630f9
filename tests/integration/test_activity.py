"""Integration tests for activity.py"""

from datetime import date, datetime, timezone

import pytest

from writeups.activity import activity_level, post_activity
from writeups.models import Post

pytestmark = pytest.mark.django_db

TODAY = date(2024, 3, 10)


def created_on(post, day, hour=12):
    Post.objects.filter(pk=post.pk).update(
        created_at=datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)
    )


@pytest.mark.parametrize(
    "count, level",
    [(0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (6, 3), (7, 4), (30, 4)],
)
def test_activity_level(count, level):
    assert activity_level(count) == level


def test_counts_posts_per_day(make_post, user, other_user):
    created_on(make_post(title="One"), date(2024, 3, 8))
    for title, hour in (("Two", 1), ("Three", 12)):
        created_on(make_post(title=title), TODAY, hour)
    created_on(make_post(title="Private", is_public=False), TODAY, 23)
    created_on(make_post(title="Theirs", author=other_user), TODAY)
    created_on(make_post(title="Too old"), date(2024, 2, 1))

    days = post_activity(user, days=10, today=TODAY)

    assert len(days) == 10
    assert days[0]["date"] == date(2024, 3, 1)
    assert days[-1]["date"] == TODAY
    by_date = {day["date"]: (day["count"], day["level"]) for day in days}
    assert by_date[date(2024, 3, 8)] == (1, 1)
    assert by_date[TODAY] == (3, 2)
    assert by_date[date(2024, 3, 9)] == (0, 0)
    assert sum(day["count"] for day in days) == 4


def test_no_posts_gives_an_empty_year(user):
    days = post_activity(user, today=TODAY)
    assert len(days) == 365
    assert {day["level"] for day in days} == {0}
