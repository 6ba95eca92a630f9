from .editor import Editor, EditorDestroyed
from .schema import parse_html, to_html
from .state import EditorState, Pos, Selection
from .uploads import ImageInsertion, ImageUploader, UploadFile, generate_upload_name

__all__ = [
    "Editor",
    "EditorDestroyed",
    "EditorState",
    "ImageInsertion",
    "ImageUploader",
    "Pos",
    "Selection",
    "UploadFile",
    "generate_upload_name",
    "parse_html",
    "to_html",
]
