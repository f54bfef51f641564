"""
Shared fixtures for django-blog-hub tests.
"""
import pytest
from django.contrib.auth import get_user_model

from blog_hub.auth import issue_token
from blog_hub.services import lifecycle

User = get_user_model()

COVER = "https://example.com/cover.png"


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def other_user(db):
    """Create a second user who owns nothing."""
    return User.objects.create_user(
        username="other",
        email="other@example.com",
        password="otherpass123",
    )


@pytest.fixture
def blog(db, user):
    """Create a blog owned by user."""
    return lifecycle.create_blog(
        user,
        title="Test Blog",
        description="This is a test blog body with enough words.",
        image=COVER,
        category="science",
    )


@pytest.fixture
def auth_header():
    """Return a function building the Authorization header for a user."""

    def build(user):
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(user)}"}

    return build
