"""
Post model: a CTF writeup or study note.

Content is stored exactly as the editor produced it. It is sanitized on every
read (see ``writeups.content.render_content``), never at write time.
"""

from django.conf import settings
from django.db import models, transaction
from django.db.models import Q
from django.urls import reverse

from writeups.tasks import update_post_derived_content

from .base import TimeStampedModel

STUDY_TAG = "Study"


class PostQuerySet(models.QuerySet):
    def public(self):
        return self.filter(is_public=True)

    def visible_to(self, user):
        """Public posts plus the user's own private ones."""
        if user is None or not user.is_authenticated:
            return self.public()
        return self.filter(Q(is_public=True) | Q(author=user))

    def by_author(self, user):
        return self.filter(author=user)

    def tagged(self, name):
        return self.filter(tags__name=name)

    def study_notes(self):
        return self.tagged(STUDY_TAG)


class PostManager(models.Manager):
    def get_queryset(self):
        return PostQuerySet(self.model, using=self._db)

    def visible_to(self, user):
        return self.get_queryset().visible_to(user)

    def by_author(self, user):
        return self.get_queryset().by_author(user)


class Post(TimeStampedModel):
    title = models.CharField(max_length=200)
    ctf_name = models.CharField(max_length=120, blank=True, verbose_name="CTF name")
    category = models.CharField(max_length=64, blank=True, db_index=True)
    tags = models.ManyToManyField("writeups.Tag", blank=True, related_name="posts")
    file_url = models.URLField(blank=True, help_text="Optional link to the challenge files.")
    is_public = models.BooleanField(default=True, db_index=True)

    # Editor markup, stored unsanitized
    content = models.TextField(blank=True)

    # Derived by update_post_derived_content
    word_count = models.PositiveIntegerField(default=0)
    reading_time_minutes = models.PositiveSmallIntegerField(default=1)
    excerpt = models.TextField(blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="writeups"
    )

    objects = PostManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_public", "created_at"], name="post_public_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args, **kwargs):
        # --- Check for content changes to trigger async tasks ---
        run_async_tasks = self.pk is None
        if not run_async_tasks:
            original = Post.objects.filter(pk=self.pk).values_list("content", flat=True).first()
            run_async_tasks = original != self.content

        super().save(*args, **kwargs)

        # --- Schedule derived content after the transaction commits ---
        if run_async_tasks:
            post_id = self.pk
            transaction.on_commit(lambda: update_post_derived_content.delay(post_id))

    # ---------------------------
    # Helpers
    # ---------------------------

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags.all()]

    @property
    def tags_csv(self) -> str:
        return ", ".join(self.tag_names)

    @property
    def is_study_note(self) -> bool:
        return STUDY_TAG in self.tag_names

    def can_view(self, user) -> bool:
        return self.is_public or self.is_author(user)

    def is_author(self, user) -> bool:
        return bool(user is not None and user.is_authenticated and user.pk == self.author_id)

    def get_absolute_url(self) -> str:
        return reverse("post-detail", kwargs={"pk": self.pk})
