# writeups/content/postprocessors/heading_ids.py

from ..headings import index_headings
from .utils import get_shared_soup, soup_to_html


def heading_ids(html, context):
    """Assign missing h2/h3 ids and leave the entries in ``context["headings"]``."""
    soup = get_shared_soup(html, context)
    context["headings"] = index_headings(soup)
    return soup_to_html(context, soup)
