"""Unit tests for editor/editor.py"""

import pytest

from writeups.editor import Editor, EditorDestroyed, Pos


@pytest.fixture
def updates():
    return []


@pytest.fixture
def editor(updates):
    return Editor("<p>Hello</p>", on_update=updates.append)


def buttons(editor):
    return {button["name"]: button for button in editor.toolbar()}


# --- commands and history ---

def test_command_updates_content_and_history(editor, updates):
    editor.set_selection(Pos(0, 0), Pos(0, 5))
    assert editor.toggle_bold()
    assert editor.get_html() == "<p><strong>Hello</strong></p>"
    assert updates == ["<p><strong>Hello</strong></p>"]

    assert editor.undo()
    assert editor.get_html() == "<p>Hello</p>"
    assert editor.can_redo()
    assert editor.redo()
    assert editor.get_html() == "<p><strong>Hello</strong></p>"
    assert updates[-1] == "<p><strong>Hello</strong></p>"


def test_selection_only_change_is_not_history(editor, updates):
    assert editor.select_all()
    assert updates == []
    assert not editor.can_undo()


def test_inapplicable_command_reports_false(editor):
    editor.set_selection(Pos(0, 2))
    assert not editor.can("set_link", "https://e.com")
    assert not editor.set_link("https://e.com")


def test_read_only_editor_refuses_commands():
    editor = Editor("<p>Hello</p>", editable=False)
    editor.select_all()
    assert not editor.toggle_italic()
    assert editor.get_html() == "<p>Hello</p>"


@pytest.mark.parametrize(
    "markup",
    ['<img src="https://x/a.png">', "<hr>", '<p><img src="https://x/a.png"></p>'],
)
def test_documents_without_text_are_editable(markup):
    editor = Editor(markup)
    state = buttons(editor)
    assert not state["bold"]["disabled"]
    assert not state["h1"]["active"]

    editor.set_selection(Pos(0, 0))
    assert editor.insert_text("caption")
    assert editor.get_html().endswith("<p>caption</p>")
    assert not editor.sync_content(editor.get_html())


# --- external content ---

def test_sync_with_own_output_keeps_selection(editor):
    editor.set_selection(Pos(0, 3))
    assert not editor.sync_content("<p>Hello</p>")
    assert not editor.sync_content("<p>Hello</p>\n")
    assert editor.state.selection.head == Pos(0, 3)


def test_sync_with_new_content_replaces_document(editor, updates):
    editor.set_selection(Pos(0, 3))
    assert editor.sync_content("<h2>Other</h2>")
    assert editor.get_html() == "<h2>Other</h2>"
    assert editor.state.selection.head == Pos(0, 0)
    assert updates == []
    assert editor.undo()
    assert editor.get_html() == "<p>Hello</p>"


def test_set_content_can_emit_update(editor, updates):
    editor.set_content("<p>New</p>", emit_update=True)
    assert updates == ["<p>New</p>"]


# --- links ---

def test_prompt_link_sets_then_removes():
    editor = Editor("<p>see docs</p>")
    editor.set_selection(Pos(0, 4), Pos(0, 8))
    seen = []

    def prompt_for(url):
        def prompt(previous):
            seen.append(previous)
            return url

        return prompt

    assert editor.prompt_link(prompt_for("https://d.io"))
    assert editor.is_active("link")
    assert editor.get_attributes("link") == {"href": "https://d.io"}

    editor.set_selection(Pos(0, 6))
    assert editor.prompt_link(prompt_for("https://docs.d.io"))
    assert seen == ["", "https://d.io"]
    assert editor.get_attributes("link") == {"href": "https://docs.d.io"}

    assert editor.prompt_link(prompt_for("   "))
    assert editor.get_html() == "<p>see docs</p>"


def test_cancelled_prompt_changes_nothing(editor, updates):
    editor.select_all()
    assert not editor.prompt_link(lambda previous: None)
    assert updates == []


# --- toolbar ---

def test_toolbar_reflects_state():
    editor = Editor("<h2>x</h2>")
    state = buttons(editor)
    assert state["h2"]["active"]
    assert not state["h1"]["active"]
    assert state["undo"]["disabled"]
    assert state["link"]["disabled"]
    assert not state["image"]["disabled"]

    editor.toggle_heading(1)
    assert not buttons(editor)["undo"]["disabled"]


def test_toolbar_disables_marks_in_code_block():
    state = buttons(Editor("<pre><code>x</code></pre>"))
    assert state["bold"]["disabled"]
    assert not state["h1"]["disabled"]


# --- teardown ---

def test_destroyed_editor_ignores_everything(editor, updates):
    editor.destroy()
    assert editor.is_destroyed
    assert not editor.toggle_bold()
    assert not editor.can("toggle_bold")
    assert not editor.sync_content("<p>Other</p>")
    assert not editor.undo()
    with pytest.raises(EditorDestroyed):
        editor.set_selection(Pos(0, 1))
    with pytest.raises(EditorDestroyed):
        editor.set_content("<p>Other</p>")
    assert updates == []
