"""
Blog create, update and delete.

Creating and deleting a blog also moves the owner's ``blog_count``;
both writes happen in one transaction. Image files are removed only
after the transaction commits.
"""
import logging

from django.db import DatabaseError, models, transaction
from django.db.models import F
from django.db.models.functions import Greatest

from .. import storage
from ..conf import blog_settings
from ..exceptions import ServerError, ValidationFailed
from ..models import Blog, Profile
from ..permissions import get_owned_or_error, require_actor

logger = logging.getLogger(__name__)


def clean_category(category):
    """Return a valid category, falling back to the default when empty."""
    if not category:
        return blog_settings.DEFAULT_CATEGORY
    if category not in blog_settings.CATEGORY_VALUES:
        raise ValidationFailed(f"Invalid category: {category}")
    return category


def clean_excerpt(excerpt):
    excerpt = (excerpt or "").strip()
    if len(excerpt) > blog_settings.EXCERPT_MAX_LENGTH:
        raise ValidationFailed(
            f"Excerpt must be at most {blog_settings.EXCERPT_MAX_LENGTH} characters"
        )
    return excerpt


def release_image(ref):
    """
    Delete a stored image once nothing references it any more.

    A path still used as another blog's cover or a profile avatar is kept.
    """
    if not ref or storage.classify_reference(ref) != storage.PATH:
        return False
    if Blog.objects.filter(image=ref).exists() or Profile.objects.filter(avatar=ref).exists():
        logger.info("Kept image %s, still referenced", ref)
        return False
    return storage.delete_image(ref)


def record_blog_added(blog):
    """Count a freshly created blog on its owner's profile."""
    Profile.for_user(blog.user)
    Profile.objects.filter(user_id=blog.user_id).update(blog_count=F("blog_count") + 1)


def remove_blog(blog):
    """
    Delete a blog with its bookkeeping, without any ownership check.

    Decrements the owner's blog_count (never below zero), removes the
    blog and its comments, and releases the cover image after commit.
    """
    image = blog.image
    with transaction.atomic():
        Profile.objects.filter(user_id=blog.user_id).update(
            blog_count=Greatest(
                F("blog_count") - 1, 0, output_field=models.PositiveIntegerField()
            ),
        )
        blog.delete()
        transaction.on_commit(lambda: release_image(image))


def create_blog(user, title, description, image, category=None, excerpt=None):
    """
    Create a blog owned by user and count it on the owner's profile.

    Slug, reading time and (if not given) excerpt are derived on save.
    """
    require_actor(user)
    title = (title or "").strip()
    if not title or not description:
        raise ValidationFailed("Title and description are required")
    if not image:
        raise ValidationFailed("Image is required")
    category = clean_category(category)
    excerpt = clean_excerpt(excerpt)

    try:
        with transaction.atomic():
            blog = Blog.objects.create(
                user=user,
                title=title,
                description=description,
                image=image,
                category=category,
                excerpt=excerpt,
            )
            record_blog_added(blog)
    except DatabaseError as exc:
        logger.exception("Failed to create blog for user %s", user.pk)
        raise ServerError("Error while creating blog") from exc

    logger.info("User %s created blog %s", user.pk, blog.pk)
    return blog


def update_blog(blog_id, user, title=None, description=None, category=None,
                excerpt=None, image=None):
    """
    Update an owned blog. Empty values keep the current ones.

    The slug is never regenerated. Replacing a stored image file deletes
    the old file once the update commits.
    """
    with transaction.atomic():
        blog = get_owned_or_error(
            Blog.objects.select_for_update(), blog_id, user, action="update"
        )
        old_image = blog.image

        if title and title.strip():
            blog.title = title.strip()
        if description:
            blog.description = description
        if category:
            blog.category = clean_category(category)
        if excerpt:
            blog.excerpt = clean_excerpt(excerpt)
        if image:
            blog.image = image

        blog.save()

        if blog.image != old_image:
            transaction.on_commit(lambda: release_image(old_image))

    logger.info("User %s updated blog %s", user.pk, blog.pk)
    return blog


def delete_blog(blog_id, user):
    """Delete an owned blog, its comments and its stored image."""
    with transaction.atomic():
        blog = get_owned_or_error(
            Blog.objects.select_for_update(), blog_id, user, action="delete"
        )
        remove_blog(blog)

    logger.info("User %s deleted blog %s", user.pk, blog_id)
