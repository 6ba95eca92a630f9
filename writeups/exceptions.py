"""Exceptions raised by the writeups content and storage layers."""


class ContentError(Exception):
    """Base class for content pipeline errors."""


class MarkdownImportError(ContentError):
    """The uploaded markdown document could not be read or converted."""


class StorageError(ContentError):
    """The object storage collaborator rejected a request."""


class ImageUploadError(ContentError):
    """An image could not be uploaded for insertion into a document."""
