"""Unit tests for editor/uploads.py"""

import re
from unittest.mock import Mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from writeups.editor import Editor, ImageInsertion, ImageUploader, Pos, UploadFile, generate_upload_name
from writeups.editor.uploads import UPLOAD_FAILED_MESSAGE
from writeups.exceptions import ImageUploadError, StorageError

PUBLIC_URL = "https://cdn.example.com/images/x.png"


@pytest.fixture
def storage():
    storage = Mock()
    storage.get_public_url.return_value = PUBLIC_URL
    return storage


@pytest.fixture
def png(png_bytes):
    return UploadFile("shot.png", "image/png", png_bytes)


@pytest.fixture
def editor():
    return Editor("<p>abcd</p>")


@pytest.fixture
def notify():
    return Mock()


@pytest.fixture
def insertion(editor, storage, notify):
    return ImageInsertion(editor, ImageUploader(storage), notify)


# --- naming ---

def test_upload_name_pattern():
    name = generate_upload_name("Screen Shot.png", now_ms=1700000000000)
    assert re.fullmatch(r"1700000000000_[0-9a-z]{6}\.png", name)


@pytest.mark.parametrize(
    "filename, extension",
    [("archive.tar.gz", "gz"), ("shot.PNG", "PNG"), ("paste", "paste"), ("", "bin")],
)
def test_upload_name_extension(filename, extension):
    assert generate_upload_name(filename, now_ms=1).endswith(f".{extension}")


def test_upload_names_are_unique():
    names = {generate_upload_name("a.png", now_ms=1) for _ in range(20)}
    assert len(names) == 20


# --- uploader ---

def test_upload_returns_public_url(storage, png):
    assert ImageUploader(storage).upload(png) == PUBLIC_URL
    path = storage.upload.call_args.args[0]
    assert re.fullmatch(r"\d+_[0-9a-z]{6}\.png", path)
    storage.upload.assert_called_once_with(path, png.data, content_type="image/png")
    storage.get_public_url.assert_called_once_with(path)


@pytest.mark.parametrize(
    "file",
    [
        UploadFile("a.txt", "text/plain", b"hello"),
        UploadFile("a.png", "image/png", b""),
        UploadFile("a.png", "image/png", b"not an image"),
    ],
)
def test_invalid_files_rejected(storage, file):
    with pytest.raises(ImageUploadError):
        ImageUploader(storage).upload(file)
    storage.upload.assert_not_called()


def test_oversize_file_rejected(storage, png):
    with pytest.raises(ImageUploadError):
        ImageUploader(storage, max_bytes=10).upload(png)


def test_svg_skips_decoding(storage):
    svg = UploadFile("a.svg", "image/svg+xml", b"<svg xmlns='http://www.w3.org/2000/svg'/>")
    assert ImageUploader(storage).upload(svg) == PUBLIC_URL


def test_storage_error_becomes_upload_error(storage, png):
    storage.upload.side_effect = StorageError("bucket missing")
    with pytest.raises(ImageUploadError) as excinfo:
        ImageUploader(storage).upload(png)
    assert isinstance(excinfo.value.__cause__, StorageError)


def test_from_django_reads_uploaded_file(png_bytes):
    uploaded = SimpleUploadedFile("x.png", png_bytes, content_type="image/png")
    file = UploadFile.from_django(uploaded)
    assert file.is_image
    assert file.data == png_bytes


# --- insertion ---

def test_paste_inserts_after_upload(insertion, editor, png):
    assert insertion.handle_paste([UploadFile("a.txt", "text/plain", b"x"), png])
    assert editor.get_html() == f'<img src="{PUBLIC_URL}"><p>abcd</p>'


def test_non_image_paste_left_to_editor(insertion, storage):
    assert not insertion.handle_paste([UploadFile("a.txt", "text/plain", b"x")])
    storage.upload.assert_not_called()


def test_failed_upload_leaves_document_untouched(insertion, editor, storage, notify, png):
    storage.upload.side_effect = StorageError("boom")
    assert insertion.handle_paste([png])
    assert editor.get_html() == "<p>abcd</p>"
    assert not editor.can_undo()
    notify.assert_called_once_with(UPLOAD_FAILED_MESSAGE)


@pytest.mark.parametrize(
    "failing, error",
    [("upload", ConnectionError("network down")), ("get_public_url", KeyError("endpoint"))],
)
def test_unexpected_storage_errors_are_contained(insertion, editor, storage, notify, png, failing, error):
    getattr(storage, failing).side_effect = error
    assert not insertion.add_from_file(png)
    assert insertion.handle_paste([png])
    assert insertion.handle_drop([png], Pos(0, 2))
    assert editor.get_html() == "<p>abcd</p>"
    assert not editor.can_undo()
    # one notification per failed attempt
    assert notify.call_count == 3
    notify.assert_called_with(UPLOAD_FAILED_MESSAGE)


def test_drop_inserts_at_pointer(insertion, editor, png):
    assert insertion.handle_drop([png], Pos(0, 2))
    assert editor.get_html() == f'<p>ab</p><img src="{PUBLIC_URL}"><p>cd</p>'


def test_drop_outside_document_uploads_without_inserting(insertion, editor, storage, png):
    assert insertion.handle_drop([png], None)
    storage.upload.assert_called_once()
    assert editor.get_html() == "<p>abcd</p>"


def test_moves_and_non_images_not_handled(insertion, storage, png):
    assert not insertion.handle_drop([png], Pos(0, 1), moved=True)
    assert not insertion.handle_drop([], Pos(0, 1))
    assert not insertion.handle_drop([UploadFile("a.txt", "text/plain", b"x"), png], Pos(0, 1))
    storage.upload.assert_not_called()


def test_editor_destroyed_during_upload(insertion, editor, storage, notify, png):
    storage.upload.side_effect = lambda *args, **kwargs: editor.destroy()
    insertion.handle_paste([png])
    assert editor.get_html() == "<p>abcd</p>"
    notify.assert_not_called()


def test_toolbar_button_inserts_at_selection(insertion, editor, png):
    editor.set_selection(Pos(0, 4))
    assert insertion.add_from_file(png)
    assert editor.get_html() == f'<p>abcd</p><img src="{PUBLIC_URL}">'
    assert not insertion.add_from_file(None)
