"""
Comment model for django-blog-hub.
"""
from django.conf import settings
from django.db import models


class Comment(models.Model):
    """
    Comment on a blog.

    Threads are two levels deep: a comment with no parent is top-level,
    a comment with a parent is a reply to that top-level comment.
    """

    blog = models.ForeignKey(
        "blog_hub.Blog",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_comments",
    )
    parent_comment = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    content = models.TextField()
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="liked_comments",
    )
    is_edited = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["blog", "parent_comment", "created_at"], name="blog_hub_comment_thread_idx"),
        ]

    def __str__(self):
        return f"Comment by {self.user} on {self.blog}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_reply(self):
        """Check if this is a reply to another comment."""
        return self.parent_comment_id is not None

    @property
    def likes_count(self):
        return self.likes.count()

    def edit(self, new_content):
        """Replace the content and flag the comment as edited."""
        self.content = new_content
        self.is_edited = True
        self.save(update_fields=["content", "is_edited", "updated_at"])
