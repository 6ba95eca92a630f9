# writeups/content/postprocessors/inline_code.py

from django.conf import settings

from .utils import add_classes, get_shared_soup, soup_to_html

DEFAULT_INLINE_CODE_CLASSES = ["inline-code", "font-mono", "text-sm", "font-medium"]


def inline_code_classes():
    return list(getattr(settings, "CONTENT_INLINE_CODE_CLASSES", DEFAULT_INLINE_CODE_CLASSES))


def inline_code_marker(html, context):
    """
    Restyle inline code spans so they read differently from code blocks.

    Only ``<code>`` elements with no ``<pre>`` ancestor are touched. Classes
    are merged, so running the pass twice gives the same markup.
    """
    soup = get_shared_soup(html, context)
    classes = inline_code_classes()

    for code in soup.find_all("code"):
        if code.find_parent("pre") is not None:
            continue
        add_classes(code, classes)

    return soup_to_html(context, soup)
