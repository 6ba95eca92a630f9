from django.urls import path

from .views import (
    IndexView,
    PostCreateView,
    PostDetailView,
    PostUpdateView,
    ProfileView,
    SearchView,
    StudyCategoryView,
    comment_create,
    comment_delete,
)

urlpatterns = [
    path("", IndexView.as_view(), name="index"),
    path("write/", PostCreateView.as_view(), name="post-create"),
    path("posts/<int:pk>/", PostDetailView.as_view(), name="post-detail"),
    path("posts/<int:pk>/edit/", PostUpdateView.as_view(), name="post-edit"),
    path("posts/<int:pk>/comments/", comment_create, name="comment-create"),
    path("comments/<int:pk>/delete/", comment_delete, name="comment-delete"),
    path("search/", SearchView.as_view(), name="search"),
    path("study/<str:category>/", StudyCategoryView.as_view(), name="study-category"),
    path("profile/", ProfileView.as_view(), name="profile"),
]
