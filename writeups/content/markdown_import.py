"""
Markdown file import for the write and edit forms.

The uploaded document is converted with pandoc and then normalized through the
editor schema, so imported content is exactly what the editor itself would
produce. The first top-level ``# heading`` line is offered as a title.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

import pypandoc

from ..editor.schema import parse_html, to_html
from ..exceptions import MarkdownImportError

logger = logging.getLogger(__name__)

_TITLE_LINE = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$")
_FENCE = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")


@dataclass(frozen=True)
class MarkdownImport:
    html: str
    title_guess: str | None


@dataclass(frozen=True)
class Draft:
    """Title and content of a post being written."""

    title: str = ""
    content: str = ""

    def apply_import(self, result: MarkdownImport) -> "Draft":
        """
        Content and title change together in a single transition. The title
        guess is only taken when no title has been entered yet.
        """
        title = self.title
        if not title.strip() and result.title_guess:
            title = result.title_guess
        return replace(self, title=title, content=result.html)


def guess_title(text: str) -> str | None:
    """The first ``# Title`` line outside fenced code blocks."""
    fence = None
    for line in text.splitlines():
        match = _FENCE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue
        title = _TITLE_LINE.match(line)
        if title:
            return title.group(1).strip()
    return None


def markdown_to_html(text: str) -> str:
    try:
        return pypandoc.convert_text(
            text,
            to="html5",
            format="gfm",
            extra_args=["--wrap=none"],
        )
    except (RuntimeError, OSError) as e:
        logger.error(f"Markdown conversion failed: {e}", exc_info=True)
        raise MarkdownImportError(f"Could not convert markdown: {e}") from e


def import_markdown(text: str) -> MarkdownImport:
    """
    Convert markdown text into editor markup and guess a title.

    Raises:
        MarkdownImportError: pandoc could not convert the document
    """
    text = text or ""
    html = markdown_to_html(text)
    return MarkdownImport(html=to_html(parse_html(html)), title_guess=guess_title(text))


def read_markdown_file(uploaded) -> str:
    """Decode an uploaded markdown file (UTF-8, optional BOM)."""
    data = uploaded.read()
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error(f"Markdown file {getattr(uploaded, 'name', '?')} is not UTF-8: {e}")
        raise MarkdownImportError("Markdown file must be UTF-8 encoded") from e
