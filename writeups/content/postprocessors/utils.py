"""Shared BeautifulSoup helpers for the content postprocessors."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

_SOUP_KEY = "__soup"
_SOURCE_KEY = "__soup_source"


def get_shared_soup(html: str, context: dict) -> BeautifulSoup:
    """Return the parsed tree for ``html``, reusing the one cached in ``context``.

    Postprocessors run back to back over the same document, so the tree is
    parsed once and handed from one processor to the next. The cache is keyed
    on the HTML string and is rebuilt whenever a processor returns markup that
    did not come from :func:`soup_to_html`.
    """
    soup = context.get(_SOUP_KEY)
    if soup is None or context.get(_SOURCE_KEY) != html:
        soup = BeautifulSoup(html, "html.parser")
        context[_SOUP_KEY] = soup
        context[_SOURCE_KEY] = html
    return soup


def soup_to_html(context: dict, soup: BeautifulSoup | None = None) -> str:
    """Serialise the shared soup and record the result as the cache key."""
    if soup is None:
        soup = context.get(_SOUP_KEY)
    html = str(soup) if soup is not None else ""
    context[_SOUP_KEY] = soup
    context[_SOURCE_KEY] = html
    return html


def clear_shared_soup(context: dict) -> None:
    context.pop(_SOUP_KEY, None)
    context.pop(_SOURCE_KEY, None)


def add_classes(element: Tag, classes) -> bool:
    """Merge ``classes`` into the element's class list; return True if it changed."""
    existing = element.get("class", [])
    if isinstance(existing, str):
        existing = existing.split()
    merged = list(dict.fromkeys(list(existing) + list(classes)))
    if merged == list(existing):
        return False
    element["class"] = merged
    return True
