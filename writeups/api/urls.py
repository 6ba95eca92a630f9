"""
URL patterns for the writeups JSON API.
"""

from django.urls import path

from .views import bookmark_toggle, import_markdown_file, like_toggle, upload_image

app_name = "api"

urlpatterns = [
    path("v1/uploads/image/", upload_image, name="upload-image"),
    path("v1/markdown/import/", import_markdown_file, name="markdown-import"),
    path("v1/posts/<int:post_id>/like/", like_toggle, name="like-toggle"),
    path("v1/posts/<int:post_id>/bookmark/", bookmark_toggle, name="bookmark-toggle"),
]
