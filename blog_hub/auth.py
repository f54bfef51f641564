"""
JWT bearer authentication for the blog_hub JSON API.

Add the middleware after Django's AuthenticationMiddleware:

    MIDDLEWARE = [
        ...
        "django.contrib.auth.middleware.AuthenticationMiddleware",
        "blog_hub.auth.JWTAuthenticationMiddleware",
    ]
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser

from .conf import blog_settings
from .exceptions import Unauthorized

logger = logging.getLogger(__name__)


def issue_token(user, minutes=None):
    """Return a signed access token identifying user."""
    if minutes is None:
        minutes = blog_settings.JWT_EXPIRE_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(user.pk),
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, blog_settings.SIGNING_KEY, algorithm=blog_settings.JWT_ALGORITHM)


def decode_token(token):
    """
    Return the active user a token identifies.

    Raises Unauthorized for expired, malformed or orphaned tokens.
    """
    try:
        payload = jwt.decode(
            token,
            blog_settings.SIGNING_KEY,
            algorithms=[blog_settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired - Please login again")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token - Please login again")

    User = get_user_model()
    try:
        user = User.objects.get(pk=payload.get("id"), is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        raise Unauthorized("User not found for token")
    return user


def token_from_header(header):
    """Accept both ``Bearer <token>`` and a bare token."""
    header = header.strip()
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return header


class JWTAuthenticationMiddleware:
    """
    Resolve ``Authorization`` headers into ``request.user``.

    Requests without the header keep whatever user the session gave them.
    A rejected token leaves an anonymous user and records the reason on
    ``request.auth_error``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_error = None
        header = request.headers.get("Authorization")
        if header:
            token = token_from_header(header)
            try:
                if not token:
                    raise Unauthorized("Token not found")
                request.user = decode_token(token)
            except Unauthorized as exc:
                logger.debug("Rejected bearer token: %s", exc.message)
                request.user = AnonymousUser()
                request.auth_error = exc.message
        return self.get_response(request)
