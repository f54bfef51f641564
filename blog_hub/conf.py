"""
Configuration settings for django-blog-hub.

Override these in your Django settings.py:

    BLOG_HUB = {
        'DEFAULT_CATEGORY': 'technology',
        'WORDS_PER_MINUTE': 200,
        'JWT_SECRET': '...',
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Categories a blog may be filed under
    "CATEGORY_CHOICES": [
        ("technology", "Technology"),
        ("science", "Science"),
        ("business", "Business"),
        ("health", "Health"),
        ("entertainment", "Entertainment"),
        ("sports", "Sports"),
        ("lifestyle", "Lifestyle"),
    ],
    "DEFAULT_CATEGORY": "technology",

    # Derived fields
    "SLUG_MAX_LENGTH": 100,
    "EXCERPT_LENGTH": 150,
    "EXCERPT_MAX_LENGTH": 200,
    "WORDS_PER_MINUTE": 200,

    # Rich-text sanitizing
    "MIN_CONTENT_LENGTH": 10,
    "ALLOWED_TAGS": [
        "p", "br", "strong", "em", "u", "s", "blockquote", "code",
        "h1", "h2", "h3", "h4", "h5", "h6",
        "ul", "ol", "li",
        "a", "img",
        "span", "div",
        "pre",
    ],
    "ALLOWED_ATTRIBUTES": [
        "href", "target", "rel",
        "src", "alt", "title", "width", "height", "style", "class",
        "color", "background",
    ],
    "ALLOWED_PROTOCOLS": ["http", "https", "mailto", "tel"],

    # Images
    "UPLOAD_PATH": "uploads/",
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png", "image/gif", "image/webp"],
    "IMAGE_MAX_SIZE_MB": 5,
    "EDITOR_IMAGE_MAX_SIZE_MB": 2,

    # Listings
    "BLOGS_PER_PAGE": 9,
    "POPULAR_LIMIT": 6,

    # Auth tokens. JWT_SECRET falls back to Django's SECRET_KEY.
    "JWT_SECRET": None,
    "JWT_ALGORITHM": "HS256",
    "JWT_EXPIRE_MINUTES": 60 * 24 * 7,
}


class BlogHubSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_hub.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_hub setting: {name}")

        user_settings = getattr(settings, "BLOG_HUB", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def CATEGORY_VALUES(self):
        """Return the bare category values."""
        return [value for value, _label in self.CATEGORY_CHOICES]

    @property
    def SIGNING_KEY(self):
        """Return the key used to sign and verify JWTs."""
        return self.JWT_SECRET or settings.SECRET_KEY


blog_settings = BlogHubSettings()
