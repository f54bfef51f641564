"""
Profile reads and edits, avatars and per-user blog statistics.
"""
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Count, Sum

from .. import storage
from ..exceptions import NotFound, ServerError, ValidationFailed
from ..models import Profile
from ..permissions import get_or_not_found, require_actor
from .lifecycle import release_image

logger = logging.getLogger(__name__)

TEXT_FIELDS = [
    "display_name",
    "bio",
    "website",
    "location",
    "twitter",
    "linkedin",
    "github",
]
PREFERENCE_FIELDS = [
    "email_notifications",
    "public_profile",
    "show_email",
    "allow_comments",
    "theme",
]
EDITABLE_FIELDS = TEXT_FIELDS + PREFERENCE_FIELDS

BIO_MAX_LENGTH = 500
POPULAR_BLOGS = 3


def get_profile(user):
    require_actor(user)
    return Profile.for_user(user)


def update_profile(user, changes):
    """
    Apply changes to the user's profile.

    Keys must be in EDITABLE_FIELDS; a None value leaves the field as is.
    Lengths and choices are checked by the model's own validation.
    """
    require_actor(user)
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationFailed(f"Unknown profile fields: {', '.join(unknown)}")

    profile = Profile.for_user(user)
    for name, value in changes.items():
        if value is None:
            continue
        if name in TEXT_FIELDS:
            value = str(value).strip()
        elif name != "theme" and not isinstance(value, bool):
            raise ValidationFailed(f"{name} must be true or false")
        setattr(profile, name, value)

    if len(profile.bio) > BIO_MAX_LENGTH:
        raise ValidationFailed(f"Bio must be at most {BIO_MAX_LENGTH} characters")
    try:
        profile.full_clean(validate_unique=False)
    except ValidationError as exc:
        message = "; ".join(
            f"{field}: {' '.join(errors)}" for field, errors in exc.message_dict.items()
        )
        raise ValidationFailed(message)

    profile.save()
    logger.info("User %s updated their profile", user.pk)
    return profile


def set_avatar(user, upload):
    """
    Store an uploaded avatar and make it the user's profile picture.

    The previous stored avatar is released after the change commits.
    """
    require_actor(user)
    if upload is None:
        raise ValidationFailed("No file uploaded")
    ref = storage.save_image(upload, prefix="avatar")

    try:
        with transaction.atomic():
            Profile.for_user(user)
            profile = Profile.objects.select_for_update().get(user=user)
            old_avatar = profile.avatar
            profile.avatar = ref
            profile.save(update_fields=["avatar", "updated_at"])
            if old_avatar and old_avatar != ref:
                transaction.on_commit(lambda: release_image(old_avatar))
    except DatabaseError as exc:
        storage.delete_image(ref)
        logger.exception("Failed to set avatar for user %s", user.pk)
        raise ServerError("Profile picture upload failed") from exc

    logger.info("User %s changed avatar to %s", user.pk, ref)
    return profile


def public_profile(user_id):
    """
    Return the profile of an active user for anyone to view.

    Profiles whose owner turned ``public_profile`` off are NotFound.
    """
    user = get_or_not_found(get_user_model().objects.filter(is_active=True), user_id)
    profile = Profile.for_user(user)
    if not profile.public_profile:
        raise NotFound("User not found")
    return profile


def blog_stats(user):
    """Live totals over the user's blogs."""
    totals = user.blogs.aggregate(
        blog_count=Count("id"),
        total_likes=Sum("likes_count"),
        total_favorites=Sum("favorites_count"),
        total_comments=Sum("comment_count"),
    )
    return {name: value or 0 for name, value in totals.items()}


def popular_blogs(user, limit=POPULAR_BLOGS):
    return list(user.blogs.order_by("-likes_count", "-created_at")[:limit])
