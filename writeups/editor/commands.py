"""
Editor commands.

Every command is a pure function ``command(state, *args) -> EditorState | None``.
``None`` means the command does not apply to the current selection; the input
state is never modified.
"""

from __future__ import annotations

from dataclasses import replace

from .schema import (
    LISTS,
    Mark,
    Node,
    Text,
    add_mark,
    find_mark,
    image,
    link,
    normalize_inline,
    remove_mark,
)
from .state import (
    EditorState,
    Pos,
    Selection,
    common_block_range,
    leaf_blocks,
    map_runs,
    mark_range,
    marks_at,
    nearest_ancestor,
    node_at,
    prune,
    remove_at,
    slice_runs,
    split_runs,
    textblocks,
)


def _selected_spans(state: EditorState, skip_code_blocks: bool = True):
    """(block index, path, start, end) for each textblock the selection covers."""
    start, end = state.selection.start, state.selection.end
    spans = []
    for index, (path, node) in enumerate(textblocks(state.doc)):
        if index < start.block or index > end.block:
            continue
        if skip_code_blocks and node.type == "code_block":
            continue
        low = start.offset if index == start.block else 0
        high = end.offset if index == end.block else len(node.text)
        if low < high:
            spans.append((index, path, low, high))
    return spans


def _selected_mark_sets(state: EditorState, spans) -> list[frozenset]:
    sets = []
    for _, path, low, high in spans:
        node = node_at(state.doc, path)
        sets.extend(run.marks for run in slice_runs(node.content, low, high))
    return sets


def _cursor_block(state: EditorState) -> tuple[tuple, Node]:
    return textblocks(state.doc)[state.selection.head.block]


def _apply_marks(state: EditorState, spans, fn) -> EditorState | None:
    document = state.doc.copy()
    changed = False
    for _, path, low, high in spans:
        node = node_at(document, path)
        updated = map_runs(node.content, low, high, fn)
        if updated != node.content:
            node.content = updated
            changed = True
    if not changed:
        return None
    return replace(state, doc=document, stored_marks=None)


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------


def toggle_mark(state: EditorState, mark_type: str) -> EditorState | None:
    mark = Mark(mark_type)

    if state.selection.empty:
        _, node = _cursor_block(state)
        if node.type == "code_block":
            return None
        current = state.stored_marks
        if current is None:
            current = marks_at(node.content, state.selection.head.offset)
        if find_mark(current, mark_type):
            updated = remove_mark(current, mark_type)
        else:
            updated = add_mark(current, mark)
        if updated == current:
            return None
        return replace(state, stored_marks=updated)

    spans = _selected_spans(state)
    if not spans:
        return None
    if all(find_mark(marks, mark_type) for marks in _selected_mark_sets(state, spans)):
        return _apply_marks(state, spans, lambda marks: remove_mark(marks, mark_type))
    return _apply_marks(state, spans, lambda marks: add_mark(marks, mark))


def _link_spans(state: EditorState):
    """The selection, or the whole link under an empty cursor."""
    if not state.selection.empty:
        return _selected_spans(state)
    head = state.selection.head
    path, node = _cursor_block(state)
    found = mark_range(node.content, head.offset, mark_type="link")
    if found is None:
        return []
    low, high, _ = found
    return [(head.block, path, low, high)]


def set_link(state: EditorState, href: str) -> EditorState | None:
    spans = _link_spans(state)
    if not spans:
        return None
    new_link = link(href)
    return _apply_marks(state, spans, lambda marks: add_mark(marks, new_link))


def unset_link(state: EditorState) -> EditorState | None:
    spans = _link_spans(state)
    if not spans:
        return None
    return _apply_marks(state, spans, lambda marks: remove_mark(marks, "link"))


def link_attributes(state: EditorState) -> dict:
    spans = _link_spans(state)
    for marks in _selected_mark_sets(state, spans):
        found = find_mark(marks, "link")
        if found is not None:
            return {"href": found.href}
    return {}


# ---------------------------------------------------------------------------
# Block types
# ---------------------------------------------------------------------------


def _range_blocks(state: EditorState):
    start, end = state.selection.start, state.selection.end
    return textblocks(state.doc)[start.block : end.block + 1]


def toggle_heading(state: EditorState, level: int) -> EditorState | None:
    if level not in range(1, 7):
        return None
    selected = _range_blocks(state)
    if not selected:
        return None

    unset = all(node.type == "heading" and node.attrs.get("level") == level for _, node in selected)
    document = state.doc.copy()
    for path, _ in selected:
        node = node_at(document, path)
        if node.type == "code_block":
            node.content = normalize_inline([Text(node.text)])
        if unset:
            node.type, node.attrs = "paragraph", {}
        else:
            node.type, node.attrs = "heading", {"level": level}
    return replace(state, doc=document, stored_marks=None)


def _lift_children(document: Node, container_path: tuple, low: int, high: int, unwrap_items: bool) -> None:
    """
    Replace a container by its children ``low..high``, keeping the rest of the
    container around them. For lists the lifted items are unwrapped to blocks.
    """
    container = node_at(document, container_path)
    before = Node(container.type, dict(container.attrs), container.content[:low])
    lifted = container.content[low : high + 1]
    after = Node(container.type, dict(container.attrs), container.content[high + 1 :])
    if unwrap_items:
        lifted = [block for item in lifted for block in item.content]

    parent = node_at(document, container_path[:-1])
    index = container_path[-1]
    replacement = [n for n in (before,) if n.content] + lifted + [n for n in (after,) if n.content]
    parent.content[index : index + 1] = replacement


def toggle_blockquote(state: EditorState) -> EditorState | None:
    blocks = textblocks(state.doc)
    if not blocks:
        return None
    path_a = blocks[state.selection.start.block][0]
    path_b = blocks[state.selection.end.block][0]
    document = state.doc.copy()

    quote = nearest_ancestor(document, path_a, {"blockquote"})
    if quote is not None and path_b[: len(quote[0])] == quote[0]:
        quote_path = quote[0]
        depth = len(quote_path)
        _lift_children(document, quote_path, path_a[depth], path_b[depth], unwrap_items=False)
        return state.with_doc(prune(document))

    parent_path, low, high = common_block_range(document, path_a, path_b)
    parent = node_at(document, parent_path)
    wrapped = Node("blockquote", content=parent.content[low : high + 1])
    parent.content[low : high + 1] = [wrapped]
    return state.with_doc(document)


def toggle_list(state: EditorState, list_type: str) -> EditorState | None:
    if list_type not in LISTS:
        return None
    blocks = textblocks(state.doc)
    if not blocks:
        return None
    path_a = blocks[state.selection.start.block][0]
    path_b = blocks[state.selection.end.block][0]
    document = state.doc.copy()

    current = nearest_ancestor(document, path_a, LISTS)
    if current is not None and path_b[: len(current[0])] == current[0]:
        list_path, list_node = current
        if list_node.type != list_type:
            list_node.type = list_type
            list_node.attrs = {"start": 1} if list_type == "ordered_list" else {}
            return state.with_doc(document)
        depth = len(list_path)
        _lift_children(document, list_path, path_a[depth], path_b[depth], unwrap_items=True)
        return state.with_doc(prune(document))

    parent_path, low, high = common_block_range(document, path_a, path_b)
    parent = node_at(document, parent_path)
    items = [Node("list_item", content=[block]) for block in parent.content[low : high + 1]]
    attrs = {"start": 1} if list_type == "ordered_list" else {}
    parent.content[low : high + 1] = [Node(list_type, attrs, items)]
    return state.with_doc(document)


# ---------------------------------------------------------------------------
# Text and structure edits
# ---------------------------------------------------------------------------


def delete_selection(state: EditorState) -> EditorState | None:
    if state.selection.empty:
        return None
    start, end = state.selection.start, state.selection.end
    document = state.doc.copy()
    blocks = textblocks(document)
    first_path, first = blocks[start.block]
    last_path, last = blocks[end.block]

    if start.block == end.block:
        head, _ = split_runs(first.content, start.offset)
        _, tail = split_runs(first.content, end.offset)
        first.content = normalize_inline(head + tail)
    else:
        head, _ = split_runs(first.content, start.offset)
        _, tail = split_runs(last.content, end.offset)
        first.content = normalize_inline(head + tail)

        leaves = leaf_blocks(document)
        order = [path for path, _ in leaves]
        doomed = order[order.index(first_path) + 1 : order.index(last_path) + 1]
        for path in reversed(doomed):
            remove_at(document, path)
        prune(document)

    return state.with_doc(document, Selection.cursor(start))


def insert_text(state: EditorState, text: str) -> EditorState | None:
    if not text:
        return None
    if not state.selection.empty:
        state = delete_selection(state)

    head = state.selection.head
    document = state.doc.copy()
    _, node = textblocks(document)[head.block]
    if node.type == "code_block":
        marks = frozenset()
    elif state.stored_marks is not None:
        marks = state.stored_marks
    else:
        marks = marks_at(node.content, head.offset)

    left, right = split_runs(node.content, head.offset)
    node.content = normalize_inline(left + [Text(text, marks)] + right)
    return state.with_doc(document, Selection.cursor(Pos(head.block, head.offset + len(text))))


def split_block(state: EditorState) -> EditorState | None:
    if not state.selection.empty:
        state = delete_selection(state)

    head = state.selection.head
    path, node = textblocks(state.doc)[head.block]
    if node.type == "code_block":
        return insert_text(state, "\n")

    document = state.doc.copy()
    node = node_at(document, path)
    left, right = split_runs(node.content, head.offset)
    node.content = normalize_inline(left)
    if node.type == "heading" and not right:
        new_block = Node("paragraph")
    else:
        new_block = Node(node.type, dict(node.attrs), normalize_inline(right))

    parent_path, index = path[:-1], path[-1]
    parent = node_at(document, parent_path)
    if parent.type == "list_item":
        following = [new_block] + parent.content[index + 1 :]
        parent.content = parent.content[: index + 1]
        item_path = parent_path
        grandparent = node_at(document, item_path[:-1])
        grandparent.content.insert(item_path[-1] + 1, Node("list_item", content=following))
    else:
        parent.content.insert(index + 1, new_block)

    return state.with_doc(document, Selection.cursor(Pos(head.block + 1, 0)))


def insert_image(state: EditorState, src: str, pos: Pos | None = None) -> EditorState | None:
    """
    Insert an image block.

    With ``pos`` the image goes at that text position (used for drops);
    otherwise it replaces the current selection. A textblock is split when the
    position falls inside its text.
    """
    if not src:
        return None
    if pos is None:
        if not state.selection.empty:
            state = delete_selection(state)
        pos = state.selection.head
    pos = state.clamp(pos)

    document = state.doc.copy()
    path, node = textblocks(document)[pos.block]
    parent = node_at(document, path[:-1])
    index = path[-1]
    length = len(node.text)
    new_image = image(src)

    if pos.offset == 0:
        parent.content.insert(index, new_image)
        cursor = Pos(pos.block, 0)
    elif pos.offset >= length:
        parent.content.insert(index + 1, new_image)
        following = textblocks(document)
        cursor = Pos(pos.block + 1, 0) if pos.block + 1 < len(following) else Pos(pos.block, length)
    else:
        left, right = split_runs(node.content, pos.offset)
        node.content = normalize_inline(left)
        tail = Node(node.type, dict(node.attrs), normalize_inline(right))
        parent.content[index + 1 : index + 1] = [new_image, tail]
        cursor = Pos(pos.block + 1, 0)

    return state.with_doc(document, Selection.cursor(cursor))


def select_all(state: EditorState) -> EditorState | None:
    blocks = textblocks(state.doc)
    last = len(blocks) - 1
    return replace(
        state,
        selection=Selection(Pos(0, 0), Pos(last, len(blocks[last][1].text))),
        stored_marks=None,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def is_active(state: EditorState, name: str, **attrs) -> bool:
    if name in ("bold", "italic", "strike", "code", "link"):
        if state.selection.empty:
            _, node = _cursor_block(state)
            marks = state.stored_marks
            if marks is None:
                marks = marks_at(node.content, state.selection.head.offset)
                if name == "link":
                    found = mark_range(node.content, state.selection.head.offset, mark_type="link")
                    return found is not None
            return find_mark(marks, name) is not None
        sets = _selected_mark_sets(state, _selected_spans(state))
        return bool(sets) and all(find_mark(marks, name) for marks in sets)

    if name == "heading":
        level = attrs.get("level")
        return all(
            node.type == "heading" and (level is None or node.attrs.get("level") == level)
            for _, node in _range_blocks(state)
        )

    if name in ("bullet_list", "ordered_list", "blockquote"):
        path, _ = textblocks(state.doc)[state.selection.start.block]
        types = LISTS if name in LISTS else {"blockquote"}
        found = nearest_ancestor(state.doc, path, types)
        return found is not None and found[1].type == name

    return False
