"""
Admin classes for reader interactions and user profiles.
"""

from django.contrib import admin

from writeups.models import Bookmark, Comment, Like, Profile


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("post", "author", "short_content", "created_at")
    list_filter = ("created_at",)
    search_fields = ("content", "post__title", "author__username")
    autocomplete_fields = ("post", "author")

    @admin.display(description="Comment")
    def short_content(self, obj):
        return obj.content if len(obj.content) <= 60 else obj.content[:57] + "..."


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ("post", "user", "created_at")
    search_fields = ("post__title", "user__username")
    autocomplete_fields = ("post", "user")


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    list_display = ("post", "user", "created_at")
    search_fields = ("post__title", "user__username")
    autocomplete_fields = ("post", "user")


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Role changes (user / manager / admin) are made from the list view."""

    list_display = ("user", "username", "role", "created_at")
    list_editable = ("role",)
    list_filter = ("role",)
    search_fields = ("username", "user__username", "user__email")
