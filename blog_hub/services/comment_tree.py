"""
Two-level comment threads.

Comments live in one table with an optional ``parent_comment``. A blog's
``comment_count`` is recomputed with a count query whenever a top-level
comment is added or removed, so any earlier drift heals itself.
"""
import logging

from django.db import transaction
from django.db.models import Prefetch, Q

from ..exceptions import NotFound, ValidationFailed
from ..models import Blog, Comment
from ..permissions import get_or_not_found, get_owned_or_error, require_actor
from .engagement import ToggleResult

logger = logging.getLogger(__name__)


def recount_comments(blog_id):
    """Set the blog's comment_count to its live number of top-level comments."""
    count = Comment.objects.filter(blog_id=blog_id, parent_comment__isnull=True).count()
    Blog.objects.filter(pk=blog_id).update(comment_count=count)
    return count


def _clean_content(content):
    content = (content or "").strip()
    if not content:
        raise ValidationFailed("Comment content is required")
    return content


def add_comment(blog_id, user, content, parent_comment_id=None):
    """
    Create a comment, or a reply when parent_comment_id is given.

    Only top-level comments trigger a recount of the blog's comment_count.
    """
    require_actor(user)
    blog = get_or_not_found(Blog.objects.all(), blog_id)
    content = _clean_content(content)

    parent = None
    if parent_comment_id:
        try:
            parent = Comment.objects.get(pk=parent_comment_id, blog=blog)
        except (Comment.DoesNotExist, ValueError, TypeError):
            raise NotFound("Parent comment not found")
        # Threads are two levels deep; a reply to a reply joins its thread.
        if parent.parent_comment_id is not None:
            parent = parent.parent_comment

    with transaction.atomic():
        comment = Comment.objects.create(
            blog=blog,
            user=user,
            parent_comment=parent,
            content=content,
        )
        if parent is None:
            recount_comments(blog.pk)

    logger.info("User %s commented on blog %s (comment %s)", user.pk, blog.pk, comment.pk)
    return comment


def list_comments(blog_id):
    """
    Return the blog's top-level comments, newest first.

    Each comment carries its replies, oldest first, in ``replies.all()``.
    """
    replies = Comment.objects.select_related("user").order_by("created_at", "pk")
    return list(
        Comment.objects.filter(blog_id=blog_id, parent_comment__isnull=True)
        .select_related("user")
        .prefetch_related(Prefetch("replies", queryset=replies), "likes")
        .order_by("-created_at", "-pk")
    )


def delete_comment(comment_id, user):
    """
    Delete a comment and its replies.

    Returns the number of comments removed.
    """
    with transaction.atomic():
        comment = get_owned_or_error(Comment.objects.all(), comment_id, user, action="delete")
        blog_id = comment.blog_id
        was_top_level = comment.parent_comment_id is None

        _total, per_model = Comment.objects.filter(
            Q(pk=comment.pk) | Q(parent_comment=comment)
        ).delete()
        removed = per_model.get(Comment._meta.label, 0)

        if was_top_level:
            recount_comments(blog_id)

    logger.info("User %s deleted comment %s (%d removed)", user.pk, comment_id, removed)
    return removed


def update_comment(comment_id, user, content):
    """Replace a comment's content and mark it edited."""
    comment = get_owned_or_error(Comment.objects.all(), comment_id, user, action="edit")
    comment.edit(_clean_content(content))
    return comment


def toggle_comment_like(comment_id, user):
    """Like or unlike a comment. The count is the size of the likes set."""
    require_actor(user)
    comment = get_or_not_found(Comment.objects.all(), comment_id)
    if comment.likes.filter(pk=user.pk).exists():
        comment.likes.remove(user)
        active = False
    else:
        comment.likes.add(user)
        active = True
    return ToggleResult(count=comment.likes.count(), active=active)
