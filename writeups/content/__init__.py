"""
Read-side content pipeline: sanitize, post-process and index stored markup.
"""

from .renderer import RenderedContent, render_content
from .sanitizer import sanitize

__all__ = ["RenderedContent", "render_content", "sanitize"]
