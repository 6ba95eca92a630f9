"""
JSON endpoints used by the editor and the post page.

Endpoints:
- POST /api/v1/uploads/image/ - Upload an image, returns its public URL
- POST /api/v1/markdown/import/ - Convert a markdown file into editor content
- POST /api/v1/posts/{id}/like/ - Toggle the current user's like
- POST /api/v1/posts/{id}/bookmark/ - Toggle the current user's bookmark
"""

import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from writeups.content.markdown_import import Draft, import_markdown, read_markdown_file
from writeups.editor.uploads import ImageUploader, UploadFile
from writeups.exceptions import ImageUploadError, MarkdownImportError, StorageError
from writeups.interactions import toggle_bookmark, toggle_like
from writeups.models import Post
from writeups.storage import get_storage

from .auth import api_login_required

logger = logging.getLogger(__name__)


@require_http_methods(["POST"])
@api_login_required
def upload_image(request):
    """
    Upload an image for insertion into a post.

    POST /api/v1/uploads/image/ (multipart, field ``file``)

    Response (201):
    {
        "url": "https://<bucket host>/images/1718000000000_k3j9xz.png"
    }
    """
    uploaded = request.FILES.get("file")
    if uploaded is None:
        return JsonResponse({"error": "file is required"}, status=400)

    uploader = ImageUploader(get_storage())
    try:
        url = uploader.upload(UploadFile.from_django(uploaded))
    except ImageUploadError as e:
        if isinstance(e.__cause__, StorageError):
            logger.error(f"Image upload by user {request.user.pk} failed: {e}")
            return JsonResponse({"error": "Failed to upload image"}, status=502)
        return JsonResponse({"error": str(e)}, status=400)

    return JsonResponse({"url": url}, status=201)


@require_http_methods(["POST"])
@api_login_required
def import_markdown_file(request):
    """
    Convert an uploaded markdown file.

    POST /api/v1/markdown/import/ (multipart, fields ``file`` and optional ``title``)

    Response (200):
    {
        "title": "Hello World",       // the given title, or the file's first "# " heading
        "content": "<h1>Hello World</h1>..."
    }
    """
    uploaded = request.FILES.get("file")
    if uploaded is None:
        return JsonResponse({"error": "file is required"}, status=400)

    draft = Draft(title=request.POST.get("title", ""))
    try:
        draft = draft.apply_import(import_markdown(read_markdown_file(uploaded)))
    except MarkdownImportError as e:
        return JsonResponse({"error": str(e)}, status=400)

    return JsonResponse({"title": draft.title, "content": draft.content})


def _toggle_response(result):
    return JsonResponse(result.as_dict(), status=200 if result.ok else 409)


@require_http_methods(["POST"])
@api_login_required
def like_toggle(request, post_id):
    post = get_object_or_404(Post.objects.visible_to(request.user), pk=post_id)
    return _toggle_response(toggle_like(request.user, post))


@require_http_methods(["POST"])
@api_login_required
def bookmark_toggle(request, post_id):
    post = get_object_or_404(Post.objects.visible_to(request.user), pk=post_id)
    return _toggle_response(toggle_bookmark(request.user, post))
