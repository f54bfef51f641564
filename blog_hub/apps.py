"""Django app configuration for blog_hub."""
from django.apps import AppConfig


class BlogHubConfig(AppConfig):
    """Configuration for the blog hub app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "blog_hub"
    verbose_name = "Blog Hub"

    def ready(self):
        """Connect signal handlers."""
        from . import signals  # noqa: F401
