"""
Image storage for blog covers, editor images and avatars.

References are stored on models as plain strings of one of three shapes:

- absolute URL (``https://...``), hosted elsewhere
- data URI (``data:image/png;base64,...``), inline
- storage path (``/uploads/blog-....png``), a file in default_storage

Only storage paths are ever deleted.
"""
import logging
import os
import uuid

from django.core.files.storage import default_storage

from .conf import blog_settings
from .exceptions import ValidationFailed

logger = logging.getLogger(__name__)

URL = "url"
DATA_URI = "data_uri"
PATH = "path"


def classify_reference(ref):
    """Return URL, DATA_URI or PATH for an image reference."""
    if ref.startswith(("http://", "https://")):
        return URL
    if ref.startswith("data:"):
        return DATA_URI
    return PATH


def validate_image(upload, max_size_mb):
    content_type = getattr(upload, "content_type", "") or ""
    if content_type not in blog_settings.ALLOWED_IMAGE_TYPES:
        raise ValidationFailed("Only image files are allowed!")
    if upload.size > max_size_mb * 1024 * 1024:
        raise ValidationFailed(f"File too large. Maximum size is {max_size_mb}MB.")


def save_image(upload, prefix="blog", max_size_mb=None):
    """
    Store an uploaded image and return its storage path reference.

    The stored name is ``<prefix>-<random><ext>`` under UPLOAD_PATH.
    """
    if max_size_mb is None:
        max_size_mb = blog_settings.IMAGE_MAX_SIZE_MB
    validate_image(upload, max_size_mb)

    extension = os.path.splitext(upload.name)[1].lower()
    filename = f"{prefix}-{uuid.uuid4().hex}{extension}"
    name = default_storage.save(blog_settings.UPLOAD_PATH + filename, upload)
    logger.info("Stored image %s", name)
    return "/" + name


def delete_image(ref):
    """
    Delete the file behind a storage path reference.

    URLs and data URIs are left alone; a missing file is not an error.
    Returns True when a file was removed.
    """
    if not ref or classify_reference(ref) != PATH:
        return False
    name = ref.lstrip("/")
    if not default_storage.exists(name):
        return False
    default_storage.delete(name)
    logger.info("Deleted image %s", name)
    return True
