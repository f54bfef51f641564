"""
Django admin configuration for blog_hub.
"""
from django.contrib import admin
from django.db import transaction
from django.utils.html import format_html

from . import storage
from .models import Blog, Comment, Profile
from .services.comment_tree import recount_comments
from .services.engagement import resync_counters
from .services.lifecycle import record_blog_added, remove_blog


class CommentInline(admin.TabularInline):
    """Inline listing of a blog's comments."""

    model = Comment
    extra = 0
    raw_id_fields = ["user", "parent_comment"]
    fields = ["user", "parent_comment", "content", "is_edited"]
    readonly_fields = ["is_edited"]


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "user",
        "category",
        "featured",
        "likes_count",
        "favorites_count",
        "comment_count",
        "reading_time",
        "created_at",
    ]
    list_filter = ["category", "featured", "created_at"]
    search_fields = ["title", "description", "user__username"]
    raw_id_fields = ["user"]
    date_hierarchy = "created_at"
    inlines = [CommentInline]
    readonly_fields = [
        "image_preview",
        "likes",
        "favorites",
        "likes_count",
        "favorites_count",
        "comment_count",
        "reading_time",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "description", "excerpt", "user", "category", "featured")
        }),
        ("Image", {
            "fields": ("image", "image_preview")
        }),
        ("SEO", {
            "fields": ("slug", "meta_title", "meta_description", "keywords"),
            "classes": ("collapse",),
        }),
        ("Engagement", {
            "fields": ("likes", "likes_count", "favorites", "favorites_count", "comment_count"),
            "classes": ("collapse",),
        }),
        ("Metadata", {
            "fields": ("reading_time", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["resync_engagement", "feature_blogs", "unfeature_blogs"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def image_preview(self, obj):
        if not obj.image or storage.classify_reference(obj.image) == storage.DATA_URI:
            return "-"
        return format_html('<img src="{}" style="max-width: 120px;" />', obj.image)

    image_preview.short_description = "Preview"

    @admin.action(description="Recount likes, favorites and comments")
    def resync_engagement(self, request, queryset):
        for blog in queryset:
            resync_counters(blog)
            recount_comments(blog.pk)
        self.message_user(request, f"{queryset.count()} blogs resynced.")

    @admin.action(description="Feature selected blogs")
    def feature_blogs(self, request, queryset):
        queryset.update(featured=True)
        self.message_user(request, f"{queryset.count()} blogs featured.")

    @admin.action(description="Unfeature selected blogs")
    def unfeature_blogs(self, request, queryset):
        queryset.update(featured=False)
        self.message_user(request, f"{queryset.count()} blogs unfeatured.")

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields.append("user")
        return fields

    def save_model(self, request, obj, form, change):
        with transaction.atomic():
            super().save_model(request, obj, form, change)
            if not change:
                record_blog_added(obj)

    def save_formset(self, request, form, formset, change):
        super().save_formset(request, form, formset, change)
        if formset.model is Comment:
            recount_comments(form.instance.pk)

    def delete_model(self, request, obj):
        remove_blog(obj)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for blog in queryset:
                remove_blog(blog)


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = [
        "preview",
        "user",
        "blog",
        "parent_comment",
        "is_edited",
        "created_at",
    ]
    list_filter = ["is_edited", "created_at"]
    search_fields = ["content", "user__username", "blog__title"]
    raw_id_fields = ["blog", "user", "parent_comment"]
    filter_horizontal = ["likes"]
    readonly_fields = ["created_at", "updated_at"]

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields += ["blog", "parent_comment"]
        return fields

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        recount_comments(obj.blog_id)

    def delete_model(self, request, obj):
        blog_id = obj.blog_id
        super().delete_model(request, obj)
        recount_comments(blog_id)

    def delete_queryset(self, request, queryset):
        blog_ids = set(queryset.values_list("blog_id", flat=True))
        super().delete_queryset(request, queryset)
        for blog_id in blog_ids:
            recount_comments(blog_id)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = [
        "user",
        "display_name",
        "blog_count",
        "total_likes",
        "most_popular_category",
        "public_profile",
        "join_date",
    ]
    list_filter = ["public_profile", "theme", "email_notifications"]
    search_fields = ["user__username", "display_name"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]
    actions = ["refresh_profile_stats"]

    fieldsets = (
        (None, {
            "fields": ("user", "display_name", "bio", "avatar", "join_date")
        }),
        ("Links", {
            "fields": ("website", "location", "twitter", "linkedin", "github"),
            "classes": ("collapse",),
        }),
        ("Stats", {
            "fields": (
                "blog_count",
                "total_likes",
                "total_comments",
                "total_views",
                "followers_count",
                "following_count",
                "most_popular_category",
                "monthly_views",
            ),
        }),
        ("Preferences", {
            "fields": (
                "email_notifications",
                "theme",
                "public_profile",
                "show_email",
                "allow_comments",
            ),
            "classes": ("collapse",),
        }),
    )

    @admin.action(description="Recompute stats from blogs")
    def refresh_profile_stats(self, request, queryset):
        for profile in queryset:
            profile.refresh_stats()
        self.message_user(request, f"{queryset.count()} profiles refreshed.")
