# writeups/templatetags/content_tags.py

from django import template
from django.utils.safestring import mark_safe

from writeups.content import render_content, sanitize
from writeups.content.headings import heading_preview
from writeups.content.scrollspy import TrackingBand

register = template.Library()


@register.filter(name="render_content")
def render_content_filter(value):
    """Sanitized, highlighted HTML for stored post content."""
    return mark_safe(render_content(value).html)


@register.simple_tag(takes_context=True)
def rendered_content(context, value):
    """
    Render content once for both the body and the table of contents:

        {% rendered_content post.content as rendered %}
        {{ rendered.html|safe }}
        {% table_of_contents rendered %}
    """
    processor_context = {
        "request": context.get("request"),
        "post": context.get("post"),
    }
    return render_content(value, context=processor_context)


@register.inclusion_tag("writeups/partials/toc.html")
def table_of_contents(rendered, viewport_height=900):
    """Outline of h2/h3 headings. Renders nothing when there are none."""
    band = TrackingBand.for_viewport(viewport_height)
    return {
        "items": rendered.outline if rendered is not None else [],
        "root_margin": band.root_margin(viewport_height),
    }


@register.filter(name="heading_preview")
def heading_preview_filter(value, limit=3):
    return heading_preview(value, limit=int(limit))


@register.filter(name="sanitize")
def sanitize_filter(value):
    return mark_safe(sanitize(value))
