"""
Models for django-blog-hub.

All models are importable from blog_hub.models:

    from blog_hub.models import Blog, Comment, Profile
"""
from .blogs import Blog
from .comments import Comment
from .users import Profile

__all__ = [
    "Blog",
    "Comment",
    "Profile",
]
