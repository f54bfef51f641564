"""
django-blog-hub - A Django blogging backend.

Features:
- Blogs with auto-derived slug, reading time and excerpt
- Likes and favorites with denormalized counters
- Two-level comment threads with self-healing comment counts
- Owner-only update/delete for blogs and comments
- JWT bearer authentication for the JSON API
- Sanitized rich-text descriptions and image upload handling
"""

__version__ = "0.1.0"
