# writeups/content/postprocessors/__init__.py

from ..sanitizer import sanitize_html
from .code_highlighter import code_highlighter
from .heading_ids import heading_ids
from .inline_code import inline_code_marker

POSTPROCESSORS = [
    sanitize_html,  # Untrusted stored markup; must stay first
    code_highlighter,  # Pygments markup for <pre><code> blocks
    inline_code_marker,  # Distinguish inline code from block code
    heading_ids,  # Stable ids on h2/h3 for the table of contents
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
