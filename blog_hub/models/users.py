"""
Profile model for django-blog-hub.

The auth user model keeps identity; Profile carries the blog-specific
details, denormalized stats and preferences.
"""
from django.conf import settings
from django.db import models
from django.db.models import Count, Sum
from django.utils import timezone


class Profile(models.Model):
    """
    Per-user profile, stats and preferences.

    Created automatically when a user is saved for the first time.
    """

    THEME_CHOICES = [
        ("light", "Light"),
        ("dark", "Dark"),
        ("auto", "Auto"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_profile",
    )

    # Profile
    display_name = models.CharField(max_length=150, blank=True)
    bio = models.TextField(max_length=500, blank=True)
    avatar = models.TextField(blank=True, default="")
    website = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255, blank=True)
    twitter = models.CharField(max_length=255, blank=True)
    linkedin = models.CharField(max_length=255, blank=True)
    github = models.CharField(max_length=255, blank=True)
    join_date = models.DateTimeField(default=timezone.now)

    # Stats
    blog_count = models.PositiveIntegerField(default=0)
    total_likes = models.PositiveIntegerField(default=0)
    total_comments = models.PositiveIntegerField(default=0)
    total_views = models.PositiveIntegerField(default=0)
    followers_count = models.PositiveIntegerField(default=0)
    following_count = models.PositiveIntegerField(default=0)
    most_popular_category = models.CharField(max_length=20, blank=True, default="")
    monthly_views = models.PositiveIntegerField(default=0)

    # Preferences
    email_notifications = models.BooleanField(default=True)
    theme = models.CharField(max_length=10, choices=THEME_CHOICES, default="auto")
    public_profile = models.BooleanField(default=True)
    show_email = models.BooleanField(default=False)
    allow_comments = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user}"

    @classmethod
    def for_user(cls, user):
        """Return the user's profile, creating it if missing."""
        profile, _created = cls.objects.get_or_create(user=user)
        return profile

    @property
    def formatted_join_date(self):
        return self.join_date.strftime("%B %Y")

    def refresh_stats(self):
        """
        Recompute blog-derived stats from the user's live blogs.

        Repairs drift in blog_count, total_likes and most_popular_category.
        """
        blogs = self.user.blogs.all()
        self.blog_count = blogs.count()
        self.total_likes = blogs.aggregate(total=Sum("likes_count"))["total"] or 0

        top = (
            blogs.values("category")
            .annotate(n=Count("id"))
            .order_by("-n", "category")
            .first()
        )
        self.most_popular_category = top["category"] if top else ""
        self.save(update_fields=[
            "blog_count",
            "total_likes",
            "most_popular_category",
            "updated_at",
        ])
