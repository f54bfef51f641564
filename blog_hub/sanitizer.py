"""
Rich-text sanitizing for blog descriptions.

Runs before a description reaches the blog services: applies the tag and
attribute allow-list and rejects content that is too short once markup
is removed.
"""
import bleach
from bleach.css_sanitizer import CSSSanitizer
from django.utils.html import strip_tags

from .conf import blog_settings
from .exceptions import ValidationFailed


def clean_html(raw):
    """Return raw HTML reduced to the allowed tags, attributes and protocols."""
    return bleach.clean(
        raw or "",
        tags=set(blog_settings.ALLOWED_TAGS),
        attributes=list(blog_settings.ALLOWED_ATTRIBUTES),
        protocols=set(blog_settings.ALLOWED_PROTOCOLS),
        css_sanitizer=CSSSanitizer(),
        strip=True,
    )


def sanitize_description(raw):
    """
    Sanitize a blog description.

    Raises ValidationFailed when the visible text is shorter than
    MIN_CONTENT_LENGTH characters.
    """
    cleaned = clean_html(raw)
    if len(strip_tags(cleaned).strip()) < blog_settings.MIN_CONTENT_LENGTH:
        raise ValidationFailed("Blog content is too short. Please add more content.")
    return cleaned
