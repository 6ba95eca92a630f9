import logging

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect
from django.views.decorators.http import require_POST
from django.views.generic import CreateView, DetailView, TemplateView, UpdateView

from .activity import post_activity
from .content import render_content
from .content.headings import heading_preview
from .forms import CommentForm, PostForm
from .interactions import add_comment, bookmark_state, delete_comment, like_state
from .models import STUDY_TAG, Category, Comment, Post
from .search import SearchFilters, available_filters, search_posts, study_notes

logger = logging.getLogger(__name__)


class IndexView(TemplateView):
    """Newest writeups visible to the current user."""

    template_name = "writeups/index.html"
    PAGE_SIZE = 20

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["posts"] = (
            Post.objects.visible_to(self.request.user)
            .select_related("author")
            .prefetch_related("tags")[: self.PAGE_SIZE]
        )
        context["categories"] = Category.objects.all()
        return context


class PostDetailView(DetailView):
    """
    Shows a single post. Private posts exist only for their author; anyone
    else gets a 404.
    """

    model = Post
    template_name = "writeups/post_detail.html"
    context_object_name = "post"

    def get_queryset(self):
        return (
            Post.objects.visible_to(self.request.user)
            .select_related("author")
            .prefetch_related("tags")
        )

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        post = self.object
        user = self.request.user

        context["rendered"] = render_content(post.content, context={"post": post})
        context["like"] = like_state(user, post)
        context["bookmark"] = bookmark_state(user, post)
        context["comments"] = post.comments.select_related("author")
        context["comment_form"] = kwargs.get("comment_form") or CommentForm()
        context["is_author"] = post.is_author(user)
        return context


class PostCreateView(LoginRequiredMixin, CreateView):
    model = Post
    form_class = PostForm
    template_name = "writeups/post_form.html"

    def get_initial(self):
        initial = super().get_initial()
        # /write/?type=study starts a study note
        if self.request.GET.get("type") == "study":
            initial["tags"] = STUDY_TAG
        return initial

    def form_valid(self, form):
        form.instance.author = self.request.user
        response = super().form_valid(form)
        logger.info(f"Post {self.object.pk} created by user {self.request.user.pk}")
        messages.success(self.request, "Writeup published.")
        return response


class PostUpdateView(LoginRequiredMixin, UpdateView):
    """Only the author can edit; other users get a 404."""

    model = Post
    form_class = PostForm
    template_name = "writeups/post_form.html"

    def get_queryset(self):
        return Post.objects.by_author(self.request.user)

    def form_valid(self, form):
        response = super().form_valid(form)
        messages.success(self.request, "Writeup updated.")
        return response


class SearchView(TemplateView):
    template_name = "writeups/search.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = SearchFilters.from_querydict(self.request.GET)
        context["filters"] = filters
        context["posts"] = search_posts(filters, user=self.request.user)
        context["available"] = available_filters(user=self.request.user)
        return context


class StudyCategoryView(TemplateView):
    """Study notes of one category, or of all categories for ``all``."""

    template_name = "writeups/study.html"
    PREVIEW_HEADINGS = 3

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        category = kwargs["category"]
        is_all = category.lower() == "all"
        posts = list(study_notes(category, user=self.request.user))

        context["category"] = category
        context["is_all"] = is_all
        context["cards"] = [
            {"post": post, "headings": heading_preview(post.content, limit=self.PREVIEW_HEADINGS)}
            for post in posts
        ]
        return context


class ProfileView(LoginRequiredMixin, TemplateView):
    """The current user's writeups (private ones included), activity graph and bookmarks."""

    template_name = "writeups/profile.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        user = self.request.user
        context["posts"] = Post.objects.by_author(user).order_by("-created_at")
        context["activity"] = post_activity(user)
        context["activity_total"] = sum(day["count"] for day in context["activity"])
        context["bookmarked"] = (
            Post.objects.visible_to(user)
            .filter(bookmarks__user=user)
            .select_related("author")
            .order_by("-bookmarks__created_at")
        )
        return context


@login_required
@require_POST
def comment_create(request, pk):
    post = get_object_or_404(Post.objects.visible_to(request.user), pk=pk)
    form = CommentForm(request.POST)
    if form.is_valid():
        add_comment(request.user, post, form.cleaned_data["content"])
        return redirect(f"{post.get_absolute_url()}#comments")

    view = PostDetailView()
    view.setup(request, pk=pk)
    view.object = post
    return view.render_to_response(view.get_context_data(comment_form=form), status=400)


@login_required
@require_POST
def comment_delete(request, pk):
    comment = get_object_or_404(Comment.objects.select_related("post"), pk=pk)
    if not delete_comment(request.user, comment):
        raise Http404("Comment not found")
    return redirect(f"{comment.post.get_absolute_url()}#comments")
