"""Integration tests for forms.py"""

from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from writeups.forms import CommentForm, PostForm

pytestmark = pytest.mark.django_db


def form_data(**overrides):
    data = {
        "title": "Baby SQLi",
        "ctf_name": "PicoCTF 2024",
        "category": "Web",
        "file_url": "",
        "is_public": "on",
        "content": "<p>Hello</p>\n",
        "tags": "SQLi, sqli, Study",
    }
    data.update(overrides)
    return data


def markdown_upload(text="# Hello World\n\nBody\n"):
    return {"markdown_file": SimpleUploadedFile("notes.md", text.encode())}


# --- post form ---

def test_save_normalizes_content_and_tags(user):
    form = PostForm(data=form_data())
    assert form.is_valid(), form.errors
    form.instance.author = user
    post = form.save()
    assert post.content == "<p>Hello</p>"
    assert post.tag_names == ["SQLi", "Study"]
    assert post.is_study_note


def test_save_without_commit_defers_tags(user):
    form = PostForm(data=form_data(tags="Web"))
    assert form.is_valid(), form.errors
    post = form.save(commit=False)
    post.author = user
    post.save()
    form.save_m2m()
    assert post.tag_names == ["Web"]


def test_title_required_without_import():
    form = PostForm(data=form_data(title="  "))
    assert not form.is_valid()
    assert form.errors["title"] == ["Title is required."]


def test_markdown_upload_fills_empty_title():
    with patch(
        "writeups.content.markdown_import.pypandoc.convert_text",
        return_value='<h1 id="hello-world">Hello World</h1>\n<p>Body</p>\n',
    ):
        form = PostForm(data=form_data(title=""), files=markdown_upload())
        assert form.is_valid(), form.errors
    assert form.cleaned_data["title"] == "Hello World"
    assert form.cleaned_data["content"] == "<h1>Hello World</h1><p>Body</p>"


def test_markdown_upload_keeps_entered_title():
    with patch(
        "writeups.content.markdown_import.pypandoc.convert_text",
        return_value="<h1>Hello World</h1>",
    ):
        form = PostForm(data=form_data(title="Mine"), files=markdown_upload())
        assert form.is_valid(), form.errors
    assert form.cleaned_data["title"] == "Mine"


def test_failed_markdown_import_is_a_field_error():
    with patch(
        "writeups.content.markdown_import.pypandoc.convert_text",
        side_effect=RuntimeError("Invalid input format"),
    ):
        form = PostForm(data=form_data(), files=markdown_upload())
        assert not form.is_valid()
    assert "markdown_file" in form.errors


def test_edit_form_prefills_tags(make_post):
    post = make_post(tags="Web, Study")
    assert PostForm(instance=post).initial["tags"] == "Study, Web"


@pytest.mark.parametrize(
    "typed, stored",
    [
        ("First para\n\nSecond & third", "<p>First para</p><p>Second &amp; third</p>"),
        ("line one\nline two", "<p>line one<br>line two</p>"),
        ("a < b", "<p>a &lt; b</p>"),
        ("", "<p></p>"),
    ],
)
def test_typed_plain_text_becomes_paragraphs(typed, stored):
    form = PostForm(data=form_data(content=typed))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["content"] == stored


def test_content_is_an_editable_textarea():
    html = str(PostForm()["content"])
    assert html.startswith("<textarea")
    assert 'type="hidden"' not in html


# --- comment form ---

@pytest.mark.parametrize("content, valid", [("Nice", True), ("   ", False), ("", False)])
def test_comment_form(content, valid):
    assert CommentForm(data={"content": content}).is_valid() is valid
