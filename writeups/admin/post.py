"""
Admin class for the Post model.
"""

import csv

from django.contrib import admin
from django.http import HttpResponse
from django.utils.html import format_html

from writeups.models import Comment, Post
from writeups.tasks import update_post_derived_content


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ("author", "content", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("author",)


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    inlines = [CommentInline]
    save_on_top = True
    date_hierarchy = "created_at"

    list_display = (
        "title",
        "author",
        "ctf_name",
        "category",
        "visibility_badge",
        "stats_compact",
        "created_at",
    )
    list_filter = ("is_public", "category", "tags", "created_at", "author")
    search_fields = ("title", "ctf_name", "category", "content")
    ordering = ("-created_at",)
    autocomplete_fields = ("author", "tags")
    readonly_fields = ("word_count", "reading_time_minutes", "excerpt", "created_at", "updated_at")

    actions = (
        "make_public",
        "make_private",
        "recompute_derived_content",
        "export_posts_csv",
    )

    @admin.display(description="Visibility", ordering="is_public")
    def visibility_badge(self, obj):
        color = "#198754" if obj.is_public else "#dc3545"
        label = "Public" if obj.is_public else "Private"
        return format_html('<span style="color: {}; font-weight: 600;">{}</span>', color, label)

    @admin.display(description="Stats")
    def stats_compact(self, obj):
        return format_html(
            '<div style="font-size: 11px; color: #6c757d;">{} min | {} words</div>',
            obj.reading_time_minutes,
            obj.word_count,
        )

    @admin.action(description="Make selected posts public")
    def make_public(self, request, queryset):
        count = queryset.update(is_public=True)
        self.message_user(request, f"Made {count} post(s) public.")

    @admin.action(description="Make selected posts private")
    def make_private(self, request, queryset):
        count = queryset.update(is_public=False)
        self.message_user(request, f"Made {count} post(s) private.")

    @admin.action(description="Recompute word count and excerpt")
    def recompute_derived_content(self, request, queryset):
        count = 0
        for post_id in queryset.values_list("pk", flat=True):
            update_post_derived_content.delay(post_id)
            count += 1
        self.message_user(request, f"Queued derived content update for {count} post(s).")

    @admin.action(description="Export selected posts as CSV")
    def export_posts_csv(self, request, queryset):
        """Export posts as CSV."""
        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = 'attachment; filename="posts_export.csv"'

        writer = csv.writer(response)
        writer.writerow(
            ["Title", "Author", "CTF", "Category", "Tags", "Public", "Word Count", "Created"]
        )
        for post in queryset.select_related("author").prefetch_related("tags"):
            writer.writerow(
                [
                    post.title,
                    post.author.get_username(),
                    post.ctf_name,
                    post.category,
                    post.tags_csv,
                    "yes" if post.is_public else "no",
                    post.word_count,
                    post.created_at.isoformat(),
                ]
            )
        return response
