"""
Heading index and table-of-contents outline.

Headings are read from the sanitized markup while it is being rendered, and
missing ``id`` attributes are assigned in the same pass, so the outline and the
page always agree on identifiers without a live DOM.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from bs4 import BeautifulSoup, Tag
from django.conf import settings

TOC_LEVELS = (2, 3)
PREVIEW_LEVELS = (1, 2, 3)


@dataclass(frozen=True)
class HeadingEntry:
    id: str
    text: str
    level: int


@dataclass(frozen=True)
class OutlineItem:
    entry: HeadingEntry
    indent: int

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def text(self) -> str:
        return self.entry.text

    @property
    def level(self) -> int:
        return self.entry.level


def heading_id_prefix() -> str:
    return getattr(settings, "CONTENT_HEADING_ID_PREFIX", "heading-")


def _heading_tags(levels: Iterable[int]) -> list[str]:
    return [f"h{level}" for level in levels]


def flatten_text(element: Tag) -> str:
    """Tag-stripped text of a heading with whitespace collapsed."""
    return " ".join(element.get_text(separator=" ").split())


def index_headings(
    soup: BeautifulSoup, levels: Iterable[int] = TOC_LEVELS, prefix: str | None = None
) -> list[HeadingEntry]:
    """
    Collect headings of the given levels in document order.

    Headings without an ``id`` get ``<prefix><n>``, where ``n`` is the heading's
    position among the collected headings; a numeric suffix is appended if that
    identifier is already used elsewhere in the document. Existing ids are
    never changed, so re-indexing an already indexed tree is a no-op.
    """
    prefix = heading_id_prefix() if prefix is None else prefix
    headings = soup.find_all(_heading_tags(levels))
    taken = {element["id"] for element in soup.find_all(id=True)}

    entries: list[HeadingEntry] = []
    for position, heading in enumerate(headings):
        identifier = heading.get("id")
        if not identifier:
            identifier = base = f"{prefix}{position}"
            suffix = 2
            while identifier in taken:
                identifier = f"{base}-{suffix}"
                suffix += 1
            heading["id"] = identifier
            taken.add(identifier)

        entries.append(
            HeadingEntry(id=identifier, text=flatten_text(heading), level=int(heading.name[1]))
        )
    return entries


def extract_headings(html: str, levels: Iterable[int] = TOC_LEVELS) -> list[HeadingEntry]:
    """Index headings of an HTML string without keeping the modified tree."""
    return index_headings(BeautifulSoup(html or "", "html.parser"), levels)


def heading_preview(html: str, limit: int = 3) -> list[HeadingEntry]:
    """The first ``limit`` h1-h3 headings with non-empty text, for post cards."""
    soup = BeautifulSoup(html or "", "html.parser")
    preview: list[HeadingEntry] = []
    for heading in soup.find_all(_heading_tags(PREVIEW_LEVELS)):
        text = flatten_text(heading)
        if not text:
            continue
        preview.append(HeadingEntry(id=heading.get("id", ""), text=text, level=int(heading.name[1])))
        if len(preview) >= limit:
            break
    return preview


def build_outline(entries: Iterable[HeadingEntry]) -> list[OutlineItem]:
    """Level-3 entries are indented one step relative to level-2 entries."""
    return [OutlineItem(entry=entry, indent=max(0, entry.level - TOC_LEVELS[0])) for entry in entries]

