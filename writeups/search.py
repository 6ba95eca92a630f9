"""
Post search and filtering.

Filters combine with AND. Title and CTF name match case-insensitive
substrings, tag and category match exactly. Results are newest first.
"""

from dataclasses import dataclass

from .models import Post, Tag


@dataclass(frozen=True)
class SearchFilters:
    query: str = ""
    tag: str = ""
    ctf: str = ""
    category: str = ""

    @classmethod
    def from_querydict(cls, params):
        return cls(
            query=params.get("q", "").strip(),
            tag=params.get("tag", "").strip(),
            ctf=params.get("ctf", "").strip(),
            category=params.get("category", "").strip(),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.tag or self.ctf or self.category)

    def as_params(self) -> dict:
        params = {"q": self.query, "tag": self.tag, "ctf": self.ctf, "category": self.category}
        return {key: value for key, value in params.items() if value}


def search_posts(filters: SearchFilters, user=None):
    posts = Post.objects.visible_to(user)
    if filters.query:
        posts = posts.filter(title__icontains=filters.query)
    if filters.tag:
        posts = posts.filter(tags__name=filters.tag)
    if filters.ctf:
        posts = posts.filter(ctf_name__icontains=filters.ctf)
    if filters.category:
        posts = posts.filter(category=filters.category)
    return posts.select_related("author").prefetch_related("tags").distinct().order_by("-created_at")


def available_filters(user=None) -> dict:
    """Distinct tag names, CTF names and categories, sorted, over visible posts."""
    posts = Post.objects.visible_to(user)
    tags = Tag.objects.filter(posts__in=posts).values_list("name", flat=True).distinct()
    ctfs = posts.exclude(ctf_name="").values_list("ctf_name", flat=True).distinct()
    categories = posts.exclude(category="").values_list("category", flat=True).distinct()
    return {
        "tags": sorted(set(tags)),
        "ctfs": sorted(set(ctfs)),
        "categories": sorted(set(categories)),
    }


def study_notes(category: str | None = None, user=None):
    """Posts tagged as study notes; ``"all"`` or no category means every category."""
    posts = Post.objects.visible_to(user).study_notes()
    if category and category.lower() != "all":
        posts = posts.filter(category__iexact=category)
    return posts.select_related("author").prefetch_related("tags").distinct().order_by("-created_at")
