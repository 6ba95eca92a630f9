"""
Taxonomy models: Category (sidebar sections with an icon) and Tag.
"""

from django.db import models
from django.template.defaultfilters import slugify

from .base import TimeStampedModel


class TagManager(models.Manager):
    """Custom manager for Tag model."""

    def get_or_create_normalized(self, name):
        """
        Get or create a tag by name, matching existing tags case-insensitively.
        Returns (tag, created) tuple.
        """
        normalized_name = self.model.normalize_name(name)
        try:
            return self.get(name__iexact=normalized_name), False
        except self.model.DoesNotExist:
            return self.create(name=normalized_name), True

    def from_csv(self, value):
        """Tags for a comma separated string, in input order, without duplicates."""
        tags = []
        seen = set()
        for part in (value or "").split(","):
            name = self.model.normalize_name(part)
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            tag, _ = self.get_or_create_normalized(name)
            tags.append(tag)
        return tags


class Tag(TimeStampedModel):
    name = models.CharField(max_length=64, unique=True)

    objects = TagManager()

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @staticmethod
    def normalize_name(name: str) -> str:
        """Strip and collapse whitespace. Case is kept as entered."""
        return " ".join((name or "").strip().split())

    def save(self, *args, **kwargs):
        self.name = self.normalize_name(self.name)
        super().save(*args, **kwargs)


class Category(TimeStampedModel):
    """A study-notes section, listed in the sidebar."""

    name = models.CharField(max_length=64, unique=True)
    slug = models.SlugField(max_length=80, unique=True, blank=True)
    icon = models.CharField(
        max_length=32,
        blank=True,
        help_text="Icon name shown next to the category in the sidebar.",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or "category"
        super().save(*args, **kwargs)
