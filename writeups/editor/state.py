"""
Editor state: a document, a selection and pending marks.

Positions address text, not tree nodes: ``Pos(block, offset)`` is a character
offset inside the ``block``-th textblock in document order. Wrapping blocks in
lists or quotes and converting block types never reorders textblocks, so those
commands leave positions valid without any mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .schema import ATOMS, LISTS, Mark, Node, Text, has_textblock, normalize_inline, paragraph, to_html


@dataclass(frozen=True, order=True)
class Pos:
    block: int
    offset: int


@dataclass(frozen=True)
class Selection:
    anchor: Pos
    head: Pos

    @classmethod
    def cursor(cls, pos: Pos) -> "Selection":
        return cls(pos, pos)

    @property
    def start(self) -> Pos:
        return min(self.anchor, self.head)

    @property
    def end(self) -> Pos:
        return max(self.anchor, self.head)

    @property
    def empty(self) -> bool:
        return self.anchor == self.head


@dataclass(frozen=True)
class EditorState:
    doc: Node
    selection: Selection
    stored_marks: frozenset | None = None

    @classmethod
    def create(cls, document: Node) -> "EditorState":
        return cls(document, Selection.cursor(Pos(0, 0)))

    def html(self) -> str:
        return to_html(self.doc)

    def textblocks(self) -> list[tuple[tuple, Node]]:
        return textblocks(self.doc)

    def clamp(self, pos: Pos) -> Pos:
        blocks = self.textblocks()
        block = max(0, min(pos.block, len(blocks) - 1))
        length = len(blocks[block][1].text)
        return Pos(block, max(0, min(pos.offset, length)))

    def with_doc(self, document: Node, selection: Selection | None = None) -> "EditorState":
        state = replace(self, doc=document, selection=selection or self.selection, stored_marks=None)
        return replace(
            state,
            selection=Selection(state.clamp(state.selection.anchor), state.clamp(state.selection.head)),
        )


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


def textblocks(node: Node, path: tuple = ()) -> list[tuple[tuple, Node]]:
    found = []
    for index, child in enumerate(node.content):
        if not isinstance(child, Node):
            continue
        child_path = path + (index,)
        if child.is_textblock:
            found.append((child_path, child))
        elif child.is_container:
            found.extend(textblocks(child, child_path))
    return found


def leaf_blocks(node: Node, path: tuple = ()) -> list[tuple[tuple, Node]]:
    """Textblocks and atom blocks in document order."""
    found = []
    for index, child in enumerate(node.content):
        child_path = path + (index,)
        if child.is_textblock or child.type in ATOMS:
            found.append((child_path, child))
        elif child.is_container:
            found.extend(leaf_blocks(child, child_path))
    return found


def node_at(root: Node, path: tuple) -> Node:
    node = root
    for index in path:
        node = node.content[index]
    return node


def ancestors(root: Node, path: tuple) -> list[tuple[tuple, Node]]:
    """Ancestors of the node at ``path``, outermost first, excluding the root."""
    found = []
    node = root
    for depth, index in enumerate(path[:-1]):
        node = node.content[index]
        found.append((path[: depth + 1], node))
    return found


def nearest_ancestor(root: Node, path: tuple, types) -> tuple[tuple, Node] | None:
    for ancestor_path, node in reversed(ancestors(root, path)):
        if node.type in types:
            return ancestor_path, node
    return None


def remove_at(root: Node, path: tuple) -> None:
    parent = node_at(root, path[:-1])
    del parent.content[path[-1]]


def prune(root: Node) -> Node:
    """Remove containers left without content and keep at least one textblock."""

    def walk(node: Node) -> None:
        kept = []
        for child in node.content:
            if isinstance(child, Node) and child.is_container:
                walk(child)
                if not child.content:
                    continue
            kept.append(child)
        node.content = kept

    walk(root)
    if not has_textblock(root):
        root.content.append(paragraph())
    return root


def common_block_range(root: Node, path_a: tuple, path_b: tuple) -> tuple[tuple, int, int]:
    """
    The container and the sibling range of blocks covering two textblocks.

    List nodes only accept list items, so when the common parent is a list the
    range moves up to cover the list itself.
    """
    if path_a == path_b:
        parent, low, high = path_a[:-1], path_a[-1], path_a[-1]
    else:
        depth = 0
        while depth < min(len(path_a), len(path_b)) and path_a[depth] == path_b[depth]:
            depth += 1
        parent, low, high = path_a[:depth], path_a[depth], path_b[depth]

    while parent and node_at(root, parent).type in LISTS | {"list_item"}:
        parent, low, high = parent[:-1], parent[-1], parent[-1]
    return parent, low, high


# ---------------------------------------------------------------------------
# Inline helpers
# ---------------------------------------------------------------------------


def split_runs(runs: list[Text], offset: int) -> tuple[list[Text], list[Text]]:
    left: list[Text] = []
    right: list[Text] = []
    position = 0
    for run in runs:
        end = position + len(run.text)
        if end <= offset:
            left.append(run)
        elif position >= offset:
            right.append(run)
        else:
            cut = offset - position
            left.append(Text(run.text[:cut], run.marks))
            right.append(Text(run.text[cut:], run.marks))
        position = end
    return left, right


def slice_runs(runs: list[Text], start: int, end: int) -> list[Text]:
    _, tail = split_runs(runs, start)
    middle, _ = split_runs(tail, end - start)
    return middle


def map_runs(runs: list[Text], start: int, end: int, fn) -> list[Text]:
    head, tail = split_runs(runs, start)
    middle, rest = split_runs(tail, end - start)
    mapped = [Text(run.text, fn(run.marks)) for run in middle]
    return normalize_inline(head + mapped + rest)


def run_spans(runs: list[Text]) -> list[tuple[int, int, frozenset]]:
    spans = []
    position = 0
    for run in runs:
        spans.append((position, position + len(run.text), run.marks))
        position += len(run.text)
    return spans


def marks_at(runs: list[Text], offset: int) -> frozenset:
    """Marks a character typed at ``offset`` would inherit."""
    before = after = None
    for start, end, marks in run_spans(runs):
        if start < offset <= end:
            before = marks
        if start <= offset < end and after is None:
            after = marks
    if before is None:
        return after or frozenset()
    # links do not grow past their end
    link_mark = next((m for m in before if m.type == "link"), None)
    if link_mark is not None and (after is None or link_mark not in after):
        return frozenset(m for m in before if m.type != "link")
    return before


def mark_range(runs: list[Text], offset: int, mark: Mark | None = None, mark_type: str = "link"):
    """The extent of the mark touching ``offset``, merged across adjacent runs."""
    spans = run_spans(runs)
    target = None
    for index, (start, end, marks) in enumerate(spans):
        if start <= offset <= end:
            candidate = mark or next((m for m in marks if m.type == mark_type), None)
            if candidate is not None and candidate in marks:
                target = (index, candidate)
                if start < offset:
                    break
    if target is None:
        return None

    index, found = target
    low = high = index
    while low > 0 and found in spans[low - 1][2]:
        low -= 1
    while high < len(spans) - 1 and found in spans[high + 1][2]:
        high += 1
    return spans[low][0], spans[high][1], found
