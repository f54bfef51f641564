"""
Like and favorite toggles.

Each toggle flips the actor's membership in a blog's likes or favorites
and moves the matching counter with an atomic UPDATE expression. The
user-side sets (``user.liked_blogs``, ``user.favorite_blogs``) are the
reverse of the same relations, so they always mirror the blog side.
"""
import logging
from dataclasses import dataclass

from django.db import DatabaseError, models, transaction
from django.db.models import F
from django.db.models.functions import Greatest

from ..exceptions import ServerError
from ..models import Blog
from ..permissions import get_or_not_found, require_actor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a toggle: the new count and whether the actor is now a member."""

    count: int
    active: bool


def _toggle(blog, user, relation, counter):
    members = getattr(blog, relation)
    if members.filter(pk=user.pk).exists():
        members.remove(user)
        Blog.objects.filter(pk=blog.pk).update(**{
            counter: Greatest(
                F(counter) - 1, 0, output_field=models.PositiveIntegerField()
            ),
        })
        active = False
    else:
        members.add(user)
        Blog.objects.filter(pk=blog.pk).update(**{counter: F(counter) + 1})
        active = True

    blog.refresh_from_db(fields=[counter])
    return ToggleResult(count=getattr(blog, counter), active=active)


def _toggle_blog_relation(blog_id, user, relation, counter, label):
    require_actor(user)
    try:
        with transaction.atomic():
            blog = get_or_not_found(Blog.objects.select_for_update(), blog_id)
            result = _toggle(blog, user, relation, counter)
    except DatabaseError as exc:
        logger.exception("Failed to toggle %s on blog %s for user %s", label, blog_id, user.pk)
        raise ServerError(f"Error while processing {label}") from exc

    logger.debug(
        "User %s %s blog %s (%s=%d)",
        user.pk,
        label if result.active else f"un-{label}",
        blog_id,
        counter,
        result.count,
    )
    return result


def toggle_like(blog_id, user):
    """
    Like the blog if the user has not liked it yet, otherwise unlike it.

    Returns a ToggleResult whose ``active`` is the new ``is_liked`` state.
    """
    return _toggle_blog_relation(blog_id, user, "likes", "likes_count", "like")


def toggle_favorite(blog_id, user):
    """Favorite or unfavorite the blog. Symmetric to toggle_like."""
    return _toggle_blog_relation(blog_id, user, "favorites", "favorites_count", "favorite")


def resync_counters(blog):
    """Recompute likes_count and favorites_count from the membership sets."""
    Blog.objects.filter(pk=blog.pk).update(
        likes_count=blog.likes.count(),
        favorites_count=blog.favorites.count(),
    )
    blog.refresh_from_db(fields=["likes_count", "favorites_count"])
    return blog
