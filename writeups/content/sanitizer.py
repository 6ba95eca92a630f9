# writeups/content/sanitizer.py

import logging
from functools import lru_cache

import bleach
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Elements removed together with their contents before bleach runs. Stripping
# them with bleach alone would leave their source text in the document.
_DROP_WITH_CONTENT = (
    "script",
    "style",
    "noscript",
    "template",
    "object",
    "embed",
    "applet",
    "frame",
    "frameset",
    "base",
    "meta",
    "link",
)

# The one non-standard construct authors may embed, and the attributes that
# make an embedded frame work.
EMBED_TAG = "iframe"
EMBED_ATTRIBUTES = [
    "src",
    "width",
    "height",
    "title",
    "target",
    "allow",
    "allowfullscreen",
    "frameborder",
    "scrolling",
    "sandbox",
    "loading",
    "referrerpolicy",
]


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Cache bleach configuration for better performance."""
    allowed_tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "div",
            "span",
            "s",
            "del",
            "ins",
            "mark",
            "sup",
            "sub",
            "u",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "hr",
            "blockquote",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            # tables
            "table",
            "thead",
            "tbody",
            "tr",
            "th",
            "td",
            "caption",
            # media
            "img",
            "figure",
            "figcaption",
            # task lists
            "input",
            # embeds
            EMBED_TAG,
        }
    )

    allowed_attrs = {
        "*": ["class", "id", "title"],
        "a": ["href", "title", "rel", "target"],
        "img": ["src", "alt", "title", "width", "height", "loading"],
        "code": ["class"],
        "pre": ["class"],
        "th": ["colspan", "rowspan", "scope"],
        "td": ["colspan", "rowspan"],
        "ol": ["start", "type"],
        "input": ["type", "checked", "disabled"],
        "blockquote": ["cite"],
        EMBED_TAG: EMBED_ATTRIBUTES,
    }

    allowed_protocols = ["http", "https", "mailto", "tel"]

    return allowed_tags, allowed_attrs, allowed_protocols


def _drop_executable_elements(markup):
    """Remove script-like elements with their contents, if any are present."""
    soup = BeautifulSoup(markup, "html.parser")
    found = soup.find_all(_DROP_WITH_CONTENT)
    if not found:
        return markup
    for element in found:
        element.decompose()
    return str(soup)


def sanitize(raw_markup):
    """
    Return ``raw_markup`` with every script-executing construct removed.

    Input is always treated as untrusted. Disallowed tags are stripped (their
    text is kept), disallowed attributes such as inline event handlers are
    dropped, and URLs with non-whitelisted protocols are removed. The result
    is stable under repeated application.

    Never raises: anything bleach cannot handle degrades to an empty document.
    """
    if not raw_markup:
        return ""
    if not isinstance(raw_markup, str):
        raw_markup = str(raw_markup)

    allowed_tags, allowed_attrs, allowed_protocols = _get_bleach_config()

    try:
        markup = _drop_executable_elements(raw_markup)
        return bleach.clean(
            markup,
            tags=allowed_tags,
            attributes=allowed_attrs,
            protocols=allowed_protocols,
            strip=True,
            strip_comments=True,
        )
    except Exception:
        logger.warning("Sanitization failed, discarding markup", exc_info=True)
        return ""


def sanitize_html(html, context):
    """Postprocessor adapter: sanitization is always the first pass."""
    return sanitize(html)
