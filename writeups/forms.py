import logging
import re

from django import forms
from django.utils.html import linebreaks

from .content.markdown_import import Draft, import_markdown, read_markdown_file
from .editor.schema import parse_html, to_html
from .exceptions import MarkdownImportError
from .models import Comment, Post, Tag

logger = logging.getLogger(__name__)

_MARKUP = re.compile(r"</?[a-zA-Z][^>]*>")


class PostForm(forms.ModelForm):
    """
    Write/edit form.

    ``content`` carries the editor's markup. An uploaded markdown file replaces
    it, and its first ``# heading`` fills the title when the title is empty.
    Both change in the same ``clean()`` step, or neither does.
    """

    tags = forms.CharField(
        required=False,
        help_text="Comma separated, e.g. Web, SQLi, Study",
    )
    markdown_file = forms.FileField(
        required=False,
        help_text="Import a .md file. Replaces the current content.",
    )

    class Meta:
        model = Post
        fields = ["title", "ctf_name", "category", "file_url", "is_public", "content"]
        widgets = {
            "content": forms.Textarea(
                attrs={
                    "rows": 20,
                    "class": "editor-content",
                    "placeholder": "Write your writeup. Plain text paragraphs or editor HTML.",
                }
            ),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # A title may come from the imported file
        self.fields["title"].required = False
        self.fields["content"].required = False
        if self.instance.pk and not self.is_bound:
            self.initial["tags"] = self.instance.tags_csv

    def clean_content(self):
        content = self.cleaned_data.get("content") or ""
        # Typed text without markup: blank lines separate paragraphs
        if content.strip() and not _MARKUP.search(content):
            content = linebreaks(content, autoescape=True)
        # Store what the editor itself would serialize
        return to_html(parse_html(content))

    def clean(self):
        cleaned = super().clean()
        draft = Draft(title=cleaned.get("title") or "", content=cleaned.get("content") or "")

        upload = cleaned.get("markdown_file")
        if upload:
            try:
                draft = draft.apply_import(import_markdown(read_markdown_file(upload)))
            except MarkdownImportError as e:
                logger.error(f"Markdown import of {upload.name} failed: {e}")
                self.add_error("markdown_file", str(e))
                return cleaned

        cleaned["title"] = draft.title.strip()
        cleaned["content"] = draft.content
        if not cleaned["title"]:
            self.add_error("title", "Title is required.")
        return cleaned

    def save(self, commit=True):
        post = super().save(commit=False)
        tag_names = self.cleaned_data.get("tags", "")
        if commit:
            post.save()
            post.tags.set(Tag.objects.from_csv(tag_names))
        else:
            def save_m2m():
                post.tags.set(Tag.objects.from_csv(tag_names))

            self.save_m2m = save_m2m
        return post


class CommentForm(forms.ModelForm):
    class Meta:
        model = Comment
        fields = ["content"]
        widgets = {
            "content": forms.Textarea(attrs={"rows": 3, "placeholder": "Write a comment..."}),
        }

    def clean_content(self):
        content = (self.cleaned_data.get("content") or "").strip()
        if not content:
            raise forms.ValidationError("Comment cannot be empty.")
        return content
