"""
Document model of the rich editor and its markup dialect.

A document is a tree of :class:`Node` objects. Textblocks (paragraph, heading,
code_block) hold a flat list of :class:`Text` runs, each carrying a set of
:class:`Mark` objects; hard breaks are stored as ``"\\n"`` inside a run.
Containers (doc, blockquote, lists, list items) hold blocks, and images and
horizontal rules are leaf blocks.

``parse_html`` accepts any HTML and keeps only what the schema can express;
``to_html`` writes the dialect back out. ``to_html(parse_html(to_html(d)))`` is
always ``to_html(d)``, which is what lets the editor compare its own output
with incoming content.
"""

from __future__ import annotations

import copy
import html
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

TEXTBLOCKS = frozenset({"paragraph", "heading", "code_block"})
CONTAINERS = frozenset({"doc", "blockquote", "bullet_list", "ordered_list", "list_item"})
ATOMS = frozenset({"image", "horizontal_rule"})
LISTS = frozenset({"bullet_list", "ordered_list"})

HEADING_LEVELS = range(1, 7)

# Serialization nesting order, outermost first.
MARK_ORDER = ("link", "bold", "italic", "strike", "code")
MARK_TAGS = {"bold": "strong", "italic": "em", "strike": "s", "code": "code"}

LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer nofollow"

_INLINE_MARK_TAGS = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "s": "strike",
    "del": "strike",
    "strike": "strike",
    "code": "code",
}
_FLATTEN_TAGS = frozenset(
    {
        "div",
        "section",
        "article",
        "main",
        "header",
        "footer",
        "aside",
        "nav",
        "figure",
        "figcaption",
        "body",
        "html",
        "details",
        "summary",
        "table",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "td",
        "th",
        "dl",
        "dt",
        "dd",
    }
)
_IGNORED_TAGS = frozenset(
    {"script", "style", "noscript", "template", "iframe", "object", "embed", "head", "title", "meta", "link"}
)
_WHITESPACE = re.compile(r"[ \t\r\n\f]+")


@dataclass(frozen=True)
class Mark:
    type: str
    href: str | None = None

    def sort_key(self):
        return MARK_ORDER.index(self.type)


BOLD = Mark("bold")
ITALIC = Mark("italic")
STRIKE = Mark("strike")
CODE = Mark("code")


def link(href: str) -> Mark:
    return Mark("link", href=href)


def add_mark(marks: frozenset, mark: Mark) -> frozenset:
    """Add ``mark`` to a mark set. Code excludes every other mark."""
    if mark in marks:
        return marks
    if any(existing.type == "code" for existing in marks):
        return marks
    if mark.type == "code":
        return frozenset({mark})
    return frozenset({m for m in marks if m.type != mark.type} | {mark})


def remove_mark(marks: frozenset, mark_type: str) -> frozenset:
    return frozenset(m for m in marks if m.type != mark_type)


def find_mark(marks, mark_type: str) -> Mark | None:
    for mark in marks:
        if mark.type == mark_type:
            return mark
    return None


@dataclass
class Text:
    text: str
    marks: frozenset = field(default_factory=frozenset)


@dataclass
class Node:
    type: str
    attrs: dict = field(default_factory=dict)
    content: list = field(default_factory=list)

    @property
    def is_textblock(self) -> bool:
        return self.type in TEXTBLOCKS

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINERS

    @property
    def text(self) -> str:
        if self.is_textblock:
            return "".join(run.text for run in self.content)
        return "".join(child.text for child in self.content if isinstance(child, Node))

    def copy(self) -> "Node":
        return copy.deepcopy(self)


def paragraph(*runs) -> Node:
    return Node("paragraph", content=normalize_inline(list(runs)))


def heading(level: int, *runs) -> Node:
    return Node("heading", {"level": level}, normalize_inline(list(runs)))


def code_block(text: str = "", language: str | None = None) -> Node:
    content = [Text(text)] if text else []
    return Node("code_block", {"language": language}, content)


def image(src: str, alt: str | None = None, title: str | None = None) -> Node:
    return Node("image", {"src": src, "alt": alt, "title": title})


def has_textblock(node: Node) -> bool:
    return any(
        child.is_textblock or (child.is_container and has_textblock(child))
        for child in node.content
        if isinstance(child, Node)
    )


def doc(*blocks) -> Node:
    """A document. One without any textblock gets a trailing empty paragraph to hold the cursor."""
    document = Node("doc", content=list(blocks))
    if not has_textblock(document):
        document.content.append(paragraph())
    return document


def normalize_inline(runs: list) -> list[Text]:
    """Drop empty runs and merge neighbours that carry the same marks."""
    merged: list[Text] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].marks == run.marks:
            merged[-1] = Text(merged[-1].text + run.text, merged[-1].marks)
        else:
            merged.append(Text(run.text, run.marks))
    return merged


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_html(markup: str | None) -> Node:
    """Parse markup into a document, discarding anything outside the schema."""
    soup = BeautifulSoup(markup or "", "html.parser")
    blocks = _parse_blocks(soup.contents)
    return doc(*blocks)


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class", [])
    return value.split() if isinstance(value, str) else list(value)


def _code_language(pre: Tag) -> str | None:
    code = pre.find("code")
    candidates = (_classes(code) if code is not None else []) + _classes(pre)
    for cls in candidates:
        if cls.startswith("language-"):
            return cls[len("language-"):] or None
    for cls in candidates:
        # pandoc writes the bare language name next to "sourceCode"
        if cls not in {"sourceCode", "highlight", "hljs"} and re.fullmatch(r"[\w+#.-]+", cls):
            return cls
    return None


def _parse_blocks(children) -> list[Node]:
    blocks: list[Node] = []
    pending: list = []

    def flush():
        if pending:
            blocks.extend(_textblock_with_images("paragraph", {}, pending[:]))
            pending.clear()

    for child in children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            if str(child).strip():
                pending.append(child)
            elif pending:
                pending.append(child)
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name
        if name in _IGNORED_TAGS:
            continue
        if name == "p":
            flush()
            blocks.extend(_textblock_with_images("paragraph", {}, child.contents))
        elif re.fullmatch(r"h[1-6]", name):
            flush()
            attrs = {"level": int(name[1])}
            blocks.extend(_textblock_with_images("heading", attrs, child.contents))
        elif name == "pre":
            flush()
            text = child.get_text()
            blocks.append(code_block(text, _code_language(child)))
        elif name == "blockquote":
            flush()
            blocks.append(Node("blockquote", content=_parse_blocks(child.contents) or [paragraph()]))
        elif name in ("ul", "ol"):
            flush()
            blocks.append(_parse_list(child))
        elif name == "li":
            flush()
            blocks.append(Node("bullet_list", content=[_parse_list_item(child)]))
        elif name == "img":
            flush()
            if child.get("src"):
                blocks.append(image(child["src"], child.get("alt"), child.get("title")))
        elif name == "hr":
            flush()
            blocks.append(Node("horizontal_rule"))
        elif name in _FLATTEN_TAGS:
            flush()
            blocks.extend(_parse_blocks(child.contents))
        else:
            pending.append(child)

    flush()
    return blocks


def _parse_list(tag: Tag) -> Node:
    list_type = "ordered_list" if tag.name == "ol" else "bullet_list"
    attrs = {}
    if list_type == "ordered_list":
        try:
            attrs["start"] = int(tag.get("start", 1))
        except (TypeError, ValueError):
            attrs["start"] = 1

    items: list[Node] = []
    stray: list = []
    for child in tag.contents:
        if isinstance(child, Tag) and child.name == "li":
            if stray:
                items.append(Node("list_item", content=_parse_blocks(stray) or [paragraph()]))
                stray = []
            items.append(_parse_list_item(child))
        elif isinstance(child, Tag) or (isinstance(child, NavigableString) and str(child).strip()):
            stray.append(child)
    if stray:
        items.append(Node("list_item", content=_parse_blocks(stray) or [paragraph()]))
    if not items:
        items.append(Node("list_item", content=[paragraph()]))
    return Node(list_type, attrs, items)


def _parse_list_item(tag: Tag) -> Node:
    return Node("list_item", content=_parse_blocks(tag.contents) or [paragraph()])


def _textblock_with_images(node_type: str, attrs: dict, children) -> list[Node]:
    """Build a textblock, lifting out any images found among its inline content."""
    items = _parse_inline(children, frozenset())
    _trim_whitespace(items)

    blocks: list[Node] = []
    runs: list[Text] = []
    saw_image = False
    for item in items:
        if isinstance(item, Node):
            saw_image = True
            if normalize_inline(runs):
                blocks.append(Node(node_type, dict(attrs), normalize_inline(runs)))
            runs = []
            blocks.append(item)
        else:
            runs.append(item)
    if normalize_inline(runs) or not saw_image:
        blocks.append(Node(node_type, dict(attrs), normalize_inline(runs)))
    return blocks


def _parse_inline(children, marks: frozenset) -> list:
    items: list = []
    for child in children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            items.append(Text(_WHITESPACE.sub(" ", str(child)), marks))
            continue
        if not isinstance(child, Tag) or child.name in _IGNORED_TAGS:
            continue

        name = child.name
        if name == "br":
            items.append(Text("\n", marks))
        elif name == "img":
            if child.get("src"):
                items.append(image(child["src"], child.get("alt"), child.get("title")))
        elif name in _INLINE_MARK_TAGS:
            mark = Mark(_INLINE_MARK_TAGS[name])
            items.extend(_parse_inline(child.contents, add_mark(marks, mark)))
        elif name == "a" and child.get("href"):
            items.extend(_parse_inline(child.contents, add_mark(marks, link(child["href"]))))
        else:
            items.extend(_parse_inline(child.contents, marks))
    return items


def _trim_whitespace(items: list) -> None:
    """Collapse spaces across run boundaries and trim the block's edges."""
    previous_space = True  # leading whitespace of a block is dropped
    for item in items:
        if isinstance(item, Node):
            previous_space = True
            continue
        text = item.text
        if previous_space and text.startswith(" "):
            text = text[1:]
        if text:
            previous_space = text.endswith(" ") or text.endswith("\n")
        item.text = text.replace(" \n", "\n").replace("\n ", "\n")

    for item in reversed(items):
        if isinstance(item, Node):
            break
        if item.text.endswith(" "):
            item.text = item.text.rstrip(" ")
            if item.text:
                break
        elif item.text:
            break


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def to_html(node: Node) -> str:
    if node.type == "doc":
        return "".join(to_html(child) for child in node.content)
    if node.type == "paragraph":
        return f"<p>{_inline_html(node.content)}</p>"
    if node.type == "heading":
        level = node.attrs.get("level", 1)
        return f"<h{level}>{_inline_html(node.content)}</h{level}>"
    if node.type == "code_block":
        language = node.attrs.get("language")
        cls = f' class="language-{html.escape(language)}"' if language else ""
        return f"<pre><code{cls}>{html.escape(node.text, quote=False)}</code></pre>"
    if node.type == "blockquote":
        return f"<blockquote>{''.join(to_html(c) for c in node.content)}</blockquote>"
    if node.type == "bullet_list":
        return f"<ul>{''.join(to_html(c) for c in node.content)}</ul>"
    if node.type == "ordered_list":
        start = node.attrs.get("start", 1)
        start_attr = f' start="{start}"' if start != 1 else ""
        return f"<ol{start_attr}>{''.join(to_html(c) for c in node.content)}</ol>"
    if node.type == "list_item":
        return f"<li>{''.join(to_html(c) for c in node.content)}</li>"
    if node.type == "image":
        parts = [f'src="{html.escape(node.attrs["src"])}"']
        for attr in ("alt", "title"):
            if node.attrs.get(attr):
                parts.append(f'{attr}="{html.escape(node.attrs[attr])}"')
        return f"<img {' '.join(parts)}>"
    if node.type == "horizontal_rule":
        return "<hr>"
    raise ValueError(f"Unknown node type: {node.type}")


def _open_tag(mark: Mark) -> str:
    if mark.type == "link":
        return (
            f'<a target="{LINK_TARGET}" rel="{LINK_REL}" '
            f'href="{html.escape(mark.href or "")}">'
        )
    return f"<{MARK_TAGS[mark.type]}>"


def _close_tag(mark: Mark) -> str:
    return "</a>" if mark.type == "link" else f"</{MARK_TAGS[mark.type]}>"


def _inline_html(runs: list[Text]) -> str:
    out: list[str] = []
    stack: list[Mark] = []
    for run in runs:
        wanted = sorted(run.marks, key=Mark.sort_key)
        # keep the longest prefix of open marks that the run still carries
        keep = 0
        while keep < len(stack) and keep < len(wanted) and stack[keep] == wanted[keep]:
            keep += 1
        while len(stack) > keep:
            out.append(_close_tag(stack.pop()))
        for mark in wanted[keep:]:
            out.append(_open_tag(mark))
            stack.append(mark)
        pieces = run.text.split("\n")
        out.append("<br>".join(html.escape(piece, quote=False) for piece in pieces))
    while stack:
        out.append(_close_tag(stack.pop()))
    return "".join(out)
