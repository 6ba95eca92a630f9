"""Shared fixtures: users, posts and a tiny valid PNG."""

import io

import pytest
from PIL import Image

from writeups.models import Post, Tag


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (2, 2), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="alice", password="pw")


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="bob", password="pw")


@pytest.fixture
def make_post(user):
    """Factory for posts; ``tags`` is a comma separated string."""

    def _make_post(**kwargs):
        tags = kwargs.pop("tags", "")
        defaults = dict(
            title="Baby SQLi",
            ctf_name="PicoCTF 2024",
            category="Web",
            content="<p>Body</p>",
            is_public=True,
            author=user,
        )
        defaults.update(kwargs)
        post = Post.objects.create(**defaults)
        if tags:
            post.tags.set(Tag.objects.from_csv(tags))
        return post

    return _make_post


@pytest.fixture
def auth_client(client, user):
    client.force_login(user)
    return client
