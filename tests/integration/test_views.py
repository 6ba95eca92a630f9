"""Integration tests for the HTML views."""

import pytest
from django.urls import reverse

from writeups.models import Comment, Post, Profile

pytestmark = pytest.mark.django_db


def new_post_data(**overrides):
    data = {
        "title": "Heap Fun",
        "ctf_name": "DEF CON",
        "category": "Pwn",
        "file_url": "",
        "is_public": "on",
        "content": "<h2>Setup</h2><p>Run it</p>",
        "tags": "Heap",
    }
    data.update(overrides)
    return data


# --- listing and detail ---

def test_index_hides_other_users_private_posts(client, make_post, other_user):
    make_post(title="Visible")
    make_post(title="Hidden", is_public=False, author=other_user)
    response = client.get(reverse("index"))
    assert response.status_code == 200
    assert [post.title for post in response.context["posts"]] == ["Visible"]


def test_detail_renders_sanitized_content_with_toc(client, make_post):
    post = make_post(content='<h2>Setup</h2><p onclick="x()">Body</p><script>alert(1)</script>')
    response = client.get(post.get_absolute_url())
    assert response.status_code == 200
    html = response.content.decode()
    assert 'id="heading-0"' in html
    assert "On this page" in html
    assert 'href="#heading-0"' in html
    assert "alert(1)" not in html
    assert "onclick" not in html


def test_private_post_only_visible_to_author(client, make_post, user, other_user):
    post = make_post(is_public=False)
    assert client.get(post.get_absolute_url()).status_code == 404

    client.force_login(other_user)
    assert client.get(post.get_absolute_url()).status_code == 404

    client.force_login(user)
    response = client.get(post.get_absolute_url())
    assert response.status_code == 200
    assert response.context["is_author"]


# --- writing ---

def test_write_requires_login(client):
    response = client.get(reverse("post-create"))
    assert response.status_code == 302


def test_create_post(auth_client, user):
    response = auth_client.post(reverse("post-create"), new_post_data())
    post = Post.objects.get(title="Heap Fun")
    assert response.status_code == 302
    assert response.url == post.get_absolute_url()
    assert post.author == user
    assert post.tag_names == ["Heap"]


def test_create_post_from_typed_text(auth_client):
    page = auth_client.get(reverse("post-create")).content.decode()
    assert '<textarea name="content"' in page

    response = auth_client.post(
        reverse("post-create"), new_post_data(content="First para\n\nSecond & third")
    )
    assert response.status_code == 302
    post = Post.objects.get(title="Heap Fun")
    assert post.content == "<p>First para</p><p>Second &amp; third</p>"


def test_study_note_starts_with_study_tag(auth_client):
    response = auth_client.get(reverse("post-create") + "?type=study")
    assert response.context["form"].initial["tags"] == "Study"


def test_only_author_can_edit(client, make_post, other_user):
    post = make_post()
    client.force_login(other_user)
    url = reverse("post-edit", args=[post.pk])
    assert client.get(url).status_code == 404
    assert client.post(url, new_post_data()).status_code == 404


def test_author_edits_post(auth_client, make_post):
    post = make_post()
    response = auth_client.post(reverse("post-edit", args=[post.pk]), new_post_data(title="Renamed"))
    assert response.status_code == 302
    post.refresh_from_db()
    assert post.title == "Renamed"
    assert post.content == "<h2>Setup</h2><p>Run it</p>"


# --- comments ---

def test_comment_create_and_delete(auth_client, make_post):
    post = make_post()
    response = auth_client.post(reverse("comment-create", args=[post.pk]), {"content": "Nice"})
    assert response.status_code == 302
    comment = Comment.objects.get(post=post)

    response = auth_client.post(reverse("comment-delete", args=[comment.pk]))
    assert response.status_code == 302
    assert not Comment.objects.exists()


def test_blank_comment_rerenders_post(auth_client, make_post):
    post = make_post()
    response = auth_client.post(reverse("comment-create", args=[post.pk]), {"content": "  "})
    assert response.status_code == 400
    assert response.context["comment_form"].errors


def test_cannot_delete_someone_elses_comment(client, make_post, user, other_user):
    post = make_post()
    comment = Comment.objects.create(post=post, author=user, content="Mine")
    client.force_login(other_user)
    assert client.post(reverse("comment-delete", args=[comment.pk])).status_code == 404
    assert Comment.objects.filter(pk=comment.pk).exists()


# --- search, study and profile ---

def test_search_view(client, make_post):
    make_post(title="Baby SQLi")
    make_post(title="Heap Fun", category="Pwn")
    response = client.get(reverse("search"), {"q": "heap"})
    assert [post.title for post in response.context["posts"]] == ["Heap Fun"]
    assert response.context["filters"].query == "heap"


def test_study_category_cards_have_heading_previews(client, make_post):
    make_post(title="Notes", content="<h1>One</h1><h2>Two</h2><h3>Three</h3><h2>Four</h2>", tags="Study")
    make_post(title="Not a note")
    response = client.get(reverse("study-category", args=["web"]))
    cards = response.context["cards"]
    assert [card["post"].title for card in cards] == ["Notes"]
    assert [heading.text for heading in cards[0]["headings"]] == ["One", "Two", "Three"]


def test_profile_lists_own_posts_and_bookmarks(auth_client, make_post, user, other_user):
    mine = make_post(title="Mine", is_public=False)
    theirs = make_post(title="Theirs", author=other_user)
    auth_client.post(reverse("api:bookmark-toggle", args=[theirs.pk]))

    response = auth_client.get(reverse("profile"))
    assert list(response.context["posts"]) == [mine]
    assert list(response.context["bookmarked"]) == [theirs]


def test_profile_created_for_new_users(user):
    assert Profile.objects.filter(user=user).exists()


def test_profile_shows_activity_graph(auth_client, make_post):
    make_post(title="Today")
    make_post(title="Also today", is_public=False)

    response = auth_client.get(reverse("profile"))
    activity = response.context["activity"]
    assert len(activity) == 365
    assert activity[-1]["count"] == 2
    assert activity[-1]["level"] == 1
    assert response.context["activity_total"] == 2
    html = response.content.decode()
    assert "Contribution Activity" in html
    assert html.count('class="activity-day') == 365
