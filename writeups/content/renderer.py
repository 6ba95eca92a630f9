# writeups/content/renderer.py

from __future__ import annotations

from dataclasses import dataclass, field

from .headings import HeadingEntry, OutlineItem, build_outline
from .postprocessors import apply_postprocessors
from .postprocessors.utils import clear_shared_soup


@dataclass
class RenderedContent:
    html: str
    headings: list[HeadingEntry] = field(default_factory=list)

    @property
    def outline(self) -> list[OutlineItem]:
        return build_outline(self.headings)

    @property
    def has_toc(self) -> bool:
        return bool(self.headings)

    def __str__(self) -> str:
        return self.html


def render_content(markup, context=None) -> RenderedContent:
    """
    Turn stored document markup into display-ready HTML.

    The markup is sanitized first (stored content is never trusted), then the
    postprocessors highlight code blocks, restyle inline code and give every
    h2/h3 a stable id. The heading entries collected during that last pass are
    returned alongside the HTML so the table of contents matches the page.

    Args:
        markup: Document markup as stored on the post
        context: Optional dict for processors that need additional data
    """
    context = context if context is not None else {}

    html = apply_postprocessors(markup or "", context)
    headings = context.get("headings", [])
    clear_shared_soup(context)

    return RenderedContent(html=html, headings=list(headings))
