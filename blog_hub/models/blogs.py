"""
Blog model and the write-time derivations for django-blog-hub.
"""
import math
import re

from django.conf import settings
from django.db import models
from django.utils.html import strip_tags

from ..conf import blog_settings

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9 -]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def slugify_title(title):
    """
    Turn a title into a URL slug.

    Lowercases, drops anything outside ``[a-z0-9 -]``, turns whitespace
    runs into hyphens, collapses repeated hyphens and truncates.

        >>> slugify_title("Hello, World! 2024")
        'hello-world-2024'
    """
    slug = _SLUG_STRIP_RE.sub("", title.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug[:blog_settings.SLUG_MAX_LENGTH].strip("-")


def count_words(text):
    """Count whitespace-separated words in text with markup removed."""
    return len(strip_tags(text or "").split())


def calculate_reading_time(text):
    """Return reading time in whole minutes, never less than one."""
    minutes = math.ceil(count_words(text) / blog_settings.WORDS_PER_MINUTE)
    return max(1, minutes)


def build_excerpt(text):
    """Return the leading characters of text followed by an ellipsis."""
    plain = strip_tags(text or "").strip()
    return plain[:blog_settings.EXCERPT_LENGTH] + "..."


class Blog(models.Model):
    """
    Blog post owned by exactly one user.

    Keeps denormalized engagement counters next to the membership sets
    they mirror:
    - likes_count == likes.count()
    - favorites_count == favorites.count()
    - comment_count == number of top-level comments
    """

    CATEGORY_CHOICES = blog_settings.CATEGORY_CHOICES

    # Content
    title = models.CharField(max_length=255)
    description = models.TextField(help_text="Sanitized rich-text body")
    image = models.TextField(
        help_text="Storage path, absolute URL or data URI of the cover image",
    )
    category = models.CharField(
        max_length=20,
        choices=CATEGORY_CHOICES,
        default=blog_settings.DEFAULT_CATEGORY,
        db_index=True,
    )
    excerpt = models.CharField(
        max_length=blog_settings.EXCERPT_MAX_LENGTH,
        blank=True,
        help_text="Optional manual excerpt. Auto-generated if blank.",
    )

    # Owner, fixed at creation
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogs",
    )

    # Engagement
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="liked_blogs",
    )
    likes_count = models.PositiveIntegerField(default=0)
    favorites = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="favorite_blogs",
    )
    favorites_count = models.PositiveIntegerField(default=0)
    comment_count = models.PositiveIntegerField(default=0)

    # SEO
    slug = models.SlugField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    keywords = models.JSONField(default=list, blank=True)

    reading_time = models.PositiveIntegerField(default=0)
    featured = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Values as last loaded from the database
    _loaded_description = None
    _loaded_user_id = None

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="blog_hub_blog_user_created_idx"),
            models.Index(fields=["-likes_count", "-favorites_count"], name="blog_hub_blog_popularity_idx"),
        ]

    def __str__(self):
        return self.title

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        if "description" in field_names:
            instance._loaded_description = instance.description
        if "user_id" in field_names:
            instance._loaded_user_id = instance.user_id
        return instance

    def save(self, *args, **kwargs):
        adding = self._state.adding
        if not adding and self._loaded_user_id is not None and self.user_id != self._loaded_user_id:
            raise ValueError("A blog's owner cannot be changed")

        # Slug is derived once and kept from then on
        if not self.slug and self.title:
            self.slug = self._unique_slug(slugify_title(self.title))

        if adding or self.description != self._loaded_description:
            self.reading_time = calculate_reading_time(self.description)

        if not self.excerpt and self.description:
            self.excerpt = build_excerpt(self.description)

        super().save(*args, **kwargs)
        self._loaded_description = self.description
        self._loaded_user_id = self.user_id

    def _unique_slug(self, base_slug):
        if not base_slug:
            return None
        slug = base_slug
        counter = 1
        while Blog.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def is_liked_by(self, user):
        return self.likes.filter(pk=user.pk).exists()

    def is_favorited_by(self, user):
        return self.favorites.filter(pk=user.pk).exists()

    def top_level_comments(self):
        """Return this blog's comments that are not replies."""
        return self.comments.filter(parent_comment__isnull=True)
