# writeups/content/postprocessors/code_highlighter.py
"""
Postprocessor that syntax-highlights block code.

Every ``<pre><code>`` block is run through Pygments. The language comes from a
``language-*`` class on the ``<code>`` element (the editor and pandoc both
emit one); without it the lexer is guessed from the source. Highlighted blocks
are marked with ``data-highlighted`` so a second pass leaves them alone.

Runs after sanitization, so the ``<span>`` markup Pygments generates is
trusted output and is not passed through the sanitizer again.
"""

import logging

from bs4 import BeautifulSoup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from .utils import add_classes, get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)

_FORMATTER = HtmlFormatter(nowrap=True, classprefix="hl-")


def _language_of(code):
    for cls in code.get("class", []):
        if cls.startswith("language-"):
            return cls[len("language-"):]
        if cls.startswith("lang-"):
            return cls[len("lang-"):]
    return None


def _lexer_for(source, language):
    if language:
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            logger.debug("No lexer for language %r, guessing", language)
    try:
        return guess_lexer(source)
    except ClassNotFound:
        return TextLexer()


def code_highlighter(html, context):
    soup = get_shared_soup(html, context)

    for pre in soup.find_all("pre"):
        code = pre.find("code")
        if code is None or code.has_attr("data-highlighted"):
            continue

        source = code.get_text()
        language = _language_of(code)
        lexer = _lexer_for(source, language)

        highlighted = highlight(source, lexer, _FORMATTER)
        # Pygments always terminates its output with a newline.
        if not source.endswith("\n") and highlighted.endswith("\n"):
            highlighted = highlighted[:-1]

        code.clear()
        fragment = BeautifulSoup(highlighted, "html.parser")
        for node in list(fragment.contents):
            code.append(node)

        code["data-highlighted"] = "yes"
        add_classes(pre, ["highlight"])
        if not language and lexer.aliases:
            add_classes(code, [f"language-{lexer.aliases[0]}"])

    return soup_to_html(context, soup)
