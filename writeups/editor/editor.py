"""
Headless rich editor.

:class:`Editor` owns one :class:`EditorState` and changes it only through the
pure functions in :mod:`writeups.editor.commands`. Every public command method
returns ``True`` if it changed the state and ``False`` if the command did not
apply; ``can()`` runs the same command without committing it, which is what the
toolbar uses to disable buttons.
"""

from __future__ import annotations

import logging
from typing import Callable

from . import commands
from .schema import parse_html, to_html
from .state import EditorState, Pos, Selection

logger = logging.getLogger(__name__)

HISTORY_DEPTH = 100


class EditorDestroyed(RuntimeError):
    """A command was issued to an editor that has been torn down."""


COMMANDS: dict[str, Callable] = {
    "toggle_bold": lambda state: commands.toggle_mark(state, "bold"),
    "toggle_italic": lambda state: commands.toggle_mark(state, "italic"),
    "toggle_strike": lambda state: commands.toggle_mark(state, "strike"),
    "toggle_code": lambda state: commands.toggle_mark(state, "code"),
    "toggle_heading": lambda state, level: commands.toggle_heading(state, level),
    "toggle_bullet_list": lambda state: commands.toggle_list(state, "bullet_list"),
    "toggle_ordered_list": lambda state: commands.toggle_list(state, "ordered_list"),
    "toggle_blockquote": commands.toggle_blockquote,
    "set_link": commands.set_link,
    "unset_link": commands.unset_link,
    "insert_image": commands.insert_image,
    "insert_text": commands.insert_text,
    "split_block": commands.split_block,
    "delete_selection": commands.delete_selection,
    "select_all": commands.select_all,
}

# (button name, command name, args, active check name, active check attrs)
TOOLBAR = [
    ("bold", "toggle_bold", (), "bold", {}),
    ("italic", "toggle_italic", (), "italic", {}),
    ("strike", "toggle_strike", (), "strike", {}),
    ("code", "toggle_code", (), "code", {}),
    ("h1", "toggle_heading", (1,), "heading", {"level": 1}),
    ("h2", "toggle_heading", (2,), "heading", {"level": 2}),
    ("h3", "toggle_heading", (3,), "heading", {"level": 3}),
    ("bullet_list", "toggle_bullet_list", (), "bullet_list", {}),
    ("ordered_list", "toggle_ordered_list", (), "ordered_list", {}),
    ("blockquote", "toggle_blockquote", (), "blockquote", {}),
]


class Editor:
    def __init__(
        self,
        content: str = "",
        editable: bool = True,
        on_update: Callable[[str], None] | None = None,
    ):
        self.editable = editable
        self.on_update = on_update
        self._state = EditorState.create(parse_html(content))
        self._undo: list[EditorState] = []
        self._redo: list[EditorState] = []
        self._destroyed = False

    # -- state ------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def get_html(self) -> str:
        return to_html(self._state.doc)

    def destroy(self) -> None:
        self._destroyed = True
        self.on_update = None
        self._undo.clear()
        self._redo.clear()

    def set_selection(self, anchor: Pos, head: Pos | None = None) -> None:
        self._check_alive()
        selection = Selection(self._state.clamp(anchor), self._state.clamp(head or anchor))
        self._state = EditorState(self._state.doc, selection)

    # -- commands ---------------------------------------------------------

    def can(self, name: str, *args) -> bool:
        """Whether ``name`` would change the document right now."""
        if self._destroyed or not self.editable:
            return False
        return COMMANDS[name](self._state, *args) is not None

    def run(self, name: str, *args) -> bool:
        if self._destroyed or not self.editable:
            return False
        new_state = COMMANDS[name](self._state, *args)
        if new_state is None:
            return False
        self._commit(new_state)
        return True

    def toggle_bold(self) -> bool:
        return self.run("toggle_bold")

    def toggle_italic(self) -> bool:
        return self.run("toggle_italic")

    def toggle_strike(self) -> bool:
        return self.run("toggle_strike")

    def toggle_code(self) -> bool:
        return self.run("toggle_code")

    def toggle_heading(self, level: int) -> bool:
        return self.run("toggle_heading", level)

    def toggle_bullet_list(self) -> bool:
        return self.run("toggle_bullet_list")

    def toggle_ordered_list(self) -> bool:
        return self.run("toggle_ordered_list")

    def toggle_blockquote(self) -> bool:
        return self.run("toggle_blockquote")

    def set_link(self, href: str) -> bool:
        return self.run("set_link", href)

    def unset_link(self) -> bool:
        return self.run("unset_link")

    def prompt_link(self, prompt: Callable[[str], str | None]) -> bool:
        """
        Ask for a URL, prefilled with the current link target.

        ``None`` (cancelled) leaves the document alone, an empty string removes
        the link and anything else sets it.
        """
        if self._destroyed or not self.editable:
            return False
        previous = commands.link_attributes(self._state).get("href", "")
        url = prompt(previous)
        if url is None:
            return False
        url = url.strip()
        if not url:
            return self.unset_link()
        return self.set_link(url)

    def insert_image(self, src: str, pos: Pos | None = None) -> bool:
        return self.run("insert_image", src, pos)

    def insert_text(self, text: str) -> bool:
        return self.run("insert_text", text)

    def split_block(self) -> bool:
        return self.run("split_block")

    def delete_selection(self) -> bool:
        return self.run("delete_selection")

    def select_all(self) -> bool:
        return self.run("select_all")

    def is_active(self, name: str, **attrs) -> bool:
        return commands.is_active(self._state, name, **attrs)

    def get_attributes(self, name: str) -> dict:
        if name == "link":
            return commands.link_attributes(self._state)
        return {}

    # -- history ----------------------------------------------------------

    def can_undo(self) -> bool:
        return not self._destroyed and self.editable and bool(self._undo)

    def can_redo(self) -> bool:
        return not self._destroyed and self.editable and bool(self._redo)

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._redo.append(self._state)
        self._state = self._undo.pop()
        self._notify()
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._undo.append(self._state)
        self._state = self._redo.pop()
        self._notify()
        return True

    # -- external content -------------------------------------------------

    def set_content(self, html: str, emit_update: bool = False) -> None:
        """Replace the whole document; the cursor moves to the start."""
        self._check_alive()
        new_state = EditorState.create(parse_html(html))
        if to_html(new_state.doc) == self.get_html():
            return
        self._push_history()
        self._state = new_state
        if emit_update:
            self._notify()

    def sync_content(self, html: str | None) -> bool:
        """
        Reflect externally provided content into the editor.

        Applied only when it differs from what the editor would serialize
        itself, so re-renders carrying the editor's own output do not reset the
        selection mid-edit.
        """
        if self._destroyed:
            return False
        html = html or ""
        if html == self.get_html():
            return False
        if to_html(parse_html(html)) == self.get_html():
            return False
        self.set_content(html)
        return True

    # -- toolbar ----------------------------------------------------------

    def toolbar(self) -> list[dict]:
        buttons = []
        for name, command, args, active_name, active_attrs in TOOLBAR:
            buttons.append(
                {
                    "name": name,
                    "active": self.is_active(active_name, **active_attrs),
                    "disabled": not self.can(command, *args),
                }
            )
        has_link = self.is_active("link")
        buttons.append({"name": "link", "active": has_link, "disabled": not (self.can("set_link", "#") or has_link)})
        buttons.append({"name": "image", "active": False, "disabled": self._destroyed or not self.editable})
        buttons.append({"name": "undo", "active": False, "disabled": not self.can_undo()})
        buttons.append({"name": "redo", "active": False, "disabled": not self.can_redo()})
        return buttons

    # -- internals --------------------------------------------------------

    def _check_alive(self) -> None:
        if self._destroyed:
            raise EditorDestroyed("editor has been destroyed")

    def _push_history(self) -> None:
        self._undo.append(self._state)
        del self._undo[:-HISTORY_DEPTH]
        self._redo.clear()

    def _commit(self, new_state: EditorState) -> None:
        changed = to_html(new_state.doc) != self.get_html()
        if changed:
            self._push_history()
        self._state = new_state
        if changed:
            self._notify()

    def _notify(self) -> None:
        if self.on_update is None:
            return
        html = self.get_html()
        logger.debug("Editor content updated (%d chars)", len(html))
        self.on_update(html)
