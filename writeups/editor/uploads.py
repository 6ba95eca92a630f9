"""
Image upload as a side effect of editing.

An image pasted, dropped or picked with the toolbar button is uploaded to
object storage under a generated name, and only once the upload succeeded is
an image node pointing at the public URL inserted. A failed upload leaves the
document exactly as it was and notifies the user once.
"""

from __future__ import annotations

import io
import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from django.conf import settings
from PIL import Image, UnidentifiedImageError

from ..exceptions import ImageUploadError, StorageError
from .state import Pos

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Failed to upload image"

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def generate_upload_name(filename, now_ms=None, suffix_length=6):
    """
    ``<epoch millis>_<random base36>.<original extension>``.

    A name without an extension keeps its last path segment as the extension
    source, so ``"paste"`` becomes ``..._abc123.paste``.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    extension = filename.rsplit(".", 1)[-1] if filename else "bin"
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(suffix_length))
    return f"{now_ms}_{suffix}.{extension}"


@dataclass
class UploadFile:
    name: str
    content_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").startswith("image/")

    @classmethod
    def from_django(cls, uploaded) -> "UploadFile":
        """Wrap a Django ``UploadedFile``."""
        return cls(name=uploaded.name, content_type=uploaded.content_type or "", data=uploaded.read())


class ImageUploader:
    """Validates an image file and stores it, returning its public URL."""

    def __init__(self, storage, max_bytes=None):
        self.storage = storage
        if max_bytes is None:
            max_bytes = getattr(settings, "IMAGE_UPLOAD_MAX_BYTES", 10 * 1024 * 1024)
        self.max_bytes = max_bytes

    def validate(self, file: UploadFile) -> None:
        if not file.is_image:
            raise ImageUploadError(f"Not an image: {file.content_type or 'unknown type'}")
        if not file.data:
            raise ImageUploadError("Empty file")
        if len(file.data) > self.max_bytes:
            raise ImageUploadError(f"Image exceeds maximum of {self.max_bytes // (1024 * 1024)}MB")
        # SVG is text and cannot be decoded by Pillow
        if file.content_type == "image/svg+xml":
            return
        try:
            with Image.open(io.BytesIO(file.data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ImageUploadError(f"Invalid image data: {e}") from e

    def upload(self, file: UploadFile) -> str:
        """
        Upload ``file`` and return its public URL.

        Raises:
            ImageUploadError: the file is not a valid image or storage rejected it
        """
        self.validate(file)
        path = generate_upload_name(file.name)
        try:
            self.storage.upload(path, file.data, content_type=file.content_type)
        except StorageError as e:
            raise ImageUploadError(str(e)) from e
        return self.storage.get_public_url(path)


class ImageInsertion:
    """
    Connects editor input events to the uploader.

    Args:
        editor: The :class:`~writeups.editor.editor.Editor` receiving images
        uploader: An :class:`ImageUploader`
        notify: Called with a message when an upload fails
    """

    def __init__(self, editor, uploader: ImageUploader, notify: Callable[[str], None]):
        self.editor = editor
        self.uploader = uploader
        self.notify = notify

    def handle_paste(self, items: Iterable[UploadFile]) -> bool:
        """Handle clipboard items. Returns True if an image item was taken over."""
        for item in items:
            if item.is_image:
                self._upload_and_insert(item, pos=None)
                return True
        return False

    def handle_drop(self, files: Iterable[UploadFile], pos: Pos | None, moved: bool = False) -> bool:
        """
        Handle a drop. ``pos`` is the document position under the pointer, or
        None when the pointer is outside the document. Moving content within
        the editor is left to the editor itself.
        """
        files = list(files)
        if moved or not files:
            return False
        file = files[0]
        if not file.is_image:
            return False
        self._upload_and_insert(file, pos=pos, require_pos=True)
        return True

    def add_from_file(self, file: UploadFile | None) -> bool:
        """Toolbar button: insert at the current selection."""
        if file is None:
            return False
        return self._upload_and_insert(file, pos=None)

    def _upload_and_insert(self, file: UploadFile, pos: Pos | None, require_pos: bool = False) -> bool:
        try:
            url = self.uploader.upload(file)
        # any storage failure, expected or not, leaves the document untouched
        except Exception as e:
            logger.error("Error uploading image %s: %s", file.name, e, exc_info=True)
            self.notify(UPLOAD_FAILED_MESSAGE)
            return False

        if self.editor.is_destroyed:
            logger.info("Editor destroyed before upload of %s finished; not inserting", file.name)
            return False
        if require_pos and pos is None:
            return False
        return self.editor.insert_image(url, pos)
