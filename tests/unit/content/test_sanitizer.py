"""Unit tests for content/sanitizer.py"""

import pytest

from writeups.content.sanitizer import sanitize


# --- safety ---

@pytest.mark.parametrize(
    "markup",
    [
        "<p>hi</p><script>alert(1)</script>",
        "<p>hi<script type='text/javascript'>alert(1)</script></p>",
        "<SCRIPT>alert(1)</SCRIPT><p>hi</p>",
        "<style>body{display:none}</style><p>hi</p>",
    ],
)
def test_script_like_elements_removed_with_content(markup):
    """Script and style elements disappear together with their source text."""
    out = sanitize(markup)
    assert "<script" not in out.lower()
    assert "alert" not in out
    assert "display:none" not in out
    assert "hi" in out


@pytest.mark.parametrize(
    "markup, attribute",
    [
        ('<img src="x.png" onerror="alert(1)">', "onerror"),
        ('<p onclick="steal()">text</p>', "onclick"),
        ('<a href="https://e.com" onmouseover="x()">l</a>', "onmouseover"),
    ],
)
def test_event_handler_attributes_stripped(markup, attribute):
    out = sanitize(markup)
    assert attribute not in out
    assert "alert" not in out


def test_javascript_urls_removed():
    out = sanitize('<a href="javascript:alert(1)">x</a>')
    assert "javascript" not in out
    assert ">x</a>" in out


def test_disallowed_tag_stripped_text_kept():
    """Unknown tags are unwrapped, their text survives."""
    out = sanitize("<p><marquee>hello</marquee></p>")
    assert "marquee" not in out
    assert "hello" in out


# --- embed allow-list ---

def test_embed_with_permitted_attributes_passes():
    markup = (
        '<iframe src="https://www.youtube.com/embed/abc" sandbox="allow-scripts allow-same-origin" '
        'scrolling="no" allowfullscreen=""></iframe>'
    )
    out = sanitize(markup)
    assert "<iframe" in out
    assert 'src="https://www.youtube.com/embed/abc"' in out
    assert 'sandbox="allow-scripts allow-same-origin"' in out
    assert 'scrolling="no"' in out
    assert "allowfullscreen" in out


def test_embed_with_disallowed_attribute_keeps_element():
    out = sanitize('<iframe src="https://e.com/embed" onload="alert(1)" sandbox=""></iframe>')
    assert "<iframe" in out
    assert 'src="https://e.com/embed"' in out
    assert "onload" not in out
    assert "alert" not in out


def test_editor_dialect_survives():
    markup = (
        '<h2>Recon</h2><p>Run <code>nmap</code> then <strong>read</strong> '
        '<a target="_blank" rel="noopener noreferrer nofollow" href="https://e.com">docs</a></p>'
        '<pre><code class="language-python">print(1)</code></pre>'
        '<ul><li><p>one</p></li></ul><blockquote><p>q</p></blockquote><img src="https://e.com/a.png">'
    )
    out = sanitize(markup)
    for fragment in (
        "<h2>Recon</h2>",
        "<code>nmap</code>",
        "<strong>read</strong>",
        'href="https://e.com"',
        'class="language-python"',
        "<li><p>one</p></li>",
        "<blockquote><p>q</p></blockquote>",
        'src="https://e.com/a.png"',
    ):
        assert fragment in out


# --- idempotence and degradation ---

@pytest.mark.parametrize(
    "markup",
    [
        "",
        "plain text",
        "<p>Hello <b>world</b></p>",
        "<p><b>unclosed <i>tags",
        "a < b && c > d",
        '<div onclick="x()">a</div><script>b</script>',
        '<iframe src="https://e.com" onload="x()"></iframe>',
        "<!-- comment --><p>after</p>",
        '<a href="javascript:void(0)">x</a><img src="data:image/png;base64,AAA">',
    ],
)
def test_sanitize_is_idempotent(markup):
    once = sanitize(markup)
    assert sanitize(once) == once


def test_empty_and_none():
    assert sanitize("") == ""
    assert sanitize(None) == ""


def test_sanitizer_failure_degrades_to_empty(monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise ValueError("parser exploded")

    monkeypatch.setattr("writeups.content.sanitizer.bleach.clean", boom)
    assert sanitize("<p>anything</p>") == ""
    assert "Sanitization failed" in caplog.text
