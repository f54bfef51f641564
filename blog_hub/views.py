"""
JSON views for django-blog-hub.
"""
import json
import logging

from django.contrib.auth import authenticate, get_user_model
from django.core.paginator import Paginator
from django.db import DatabaseError
from django.http import JsonResponse, QueryDict
from django.http.multipartparser import MultiPartParserError
from django.utils.datastructures import MultiValueDict
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from . import storage
from .auth import issue_token
from .conf import blog_settings
from .exceptions import BlogHubError, Unauthorized, ValidationFailed
from .models import Blog
from .permissions import get_or_not_found
from .sanitizer import sanitize_description
from .services import comment_tree, engagement, lifecycle, profiles

logger = logging.getLogger(__name__)


def user_dict(user):
    profile = getattr(user, "blog_profile", None)
    return {
        "id": user.pk,
        "username": user.get_username(),
        "display_name": profile.display_name if profile else "",
        "avatar": profile.avatar if profile else "",
    }


def blog_dict(blog, viewer=None):
    data = {
        "id": blog.pk,
        "title": blog.title,
        "description": blog.description,
        "image": blog.image,
        "category": blog.category,
        "excerpt": blog.excerpt,
        "slug": blog.slug,
        "reading_time": blog.reading_time,
        "likes_count": blog.likes_count,
        "favorites_count": blog.favorites_count,
        "comment_count": blog.comment_count,
        "featured": blog.featured,
        "user": user_dict(blog.user),
        "created_at": blog.created_at.isoformat(),
        "updated_at": blog.updated_at.isoformat(),
    }
    if viewer is not None and viewer.is_authenticated:
        data["is_liked"] = blog.is_liked_by(viewer)
        data["is_favorited"] = blog.is_favorited_by(viewer)
    return data


def comment_dict(comment, with_replies=False):
    data = {
        "id": comment.pk,
        "blog": comment.blog_id,
        "content": comment.content,
        "user": user_dict(comment.user),
        "parent_comment": comment.parent_comment_id,
        "likes_count": comment.likes_count,
        "is_edited": comment.is_edited,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
    }
    if with_replies:
        data["replies"] = [comment_dict(reply) for reply in comment.replies.all()]
    return data


def request_payload(request):
    """
    Return (data, files) for a request body.

    Handles JSON, form and urlencoded bodies for any method. Django only
    parses multipart bodies for POST, so PUT uploads are parsed here.
    """
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationFailed("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationFailed("Expected a JSON object")
        return data, MultiValueDict()
    if request.method == "POST":
        return request.POST, request.FILES
    if request.content_type == "multipart/form-data":
        try:
            return request.parse_file_upload(request.META, request)
        except MultiPartParserError:
            raise ValidationFailed("Malformed multipart body")
    return QueryDict(request.body), MultiValueDict()


def request_data(request):
    """Return the request body as a mapping (JSON, form or urlencoded)."""
    return request_payload(request)[0]


@method_decorator(csrf_exempt, name="dispatch")
class ApiView(View):
    """
    Base view that renders BlogHubError as a JSON error response.

    Set ``login_required`` to reject anonymous requests with 401.
    """

    login_required = False

    def dispatch(self, request, *args, **kwargs):
        try:
            if self.login_required and not request.user.is_authenticated:
                raise Unauthorized(
                    getattr(request, "auth_error", None) or "Authorization header required"
                )
            return super().dispatch(request, *args, **kwargs)
        except BlogHubError as exc:
            return JsonResponse(exc.as_dict(), status=exc.status_code)
        except DatabaseError:
            logger.exception("Database error in %s", type(self).__name__)
            return JsonResponse(
                {"success": False, "kind": "server_error", "message": "Server error"},
                status=500,
            )


def blog_queryset():
    return Blog.objects.select_related("user", "user__blog_profile")


class BlogListView(ApiView):
    """List blogs newest first, optionally filtered by category."""

    def get(self, request):
        qs = blog_queryset()
        category = request.GET.get("category")
        if category and category != "all":
            qs = qs.filter(category=category)

        try:
            per_page = int(request.GET.get("limit", blog_settings.BLOGS_PER_PAGE))
        except ValueError:
            raise ValidationFailed("limit must be a number")
        paginator = Paginator(qs, max(1, per_page))
        page = paginator.get_page(request.GET.get("page"))

        return JsonResponse({
            "success": True,
            "total": paginator.count,
            "total_pages": paginator.num_pages,
            "current_page": page.number,
            "blogs": [blog_dict(blog) for blog in page.object_list],
        })


class PopularBlogListView(ApiView):
    """Blogs ranked by likes, then favorites, then recency."""

    def get(self, request):
        qs = blog_queryset().order_by("-likes_count", "-favorites_count", "-created_at")
        blogs = qs[:blog_settings.POPULAR_LIMIT]
        return JsonResponse({
            "success": True,
            "blogs": [blog_dict(blog) for blog in blogs],
        })


class CategoryBlogListView(ApiView):
    """All blogs in one category."""

    def get(self, request, category):
        if category not in blog_settings.CATEGORY_VALUES:
            raise ValidationFailed(f"Invalid category: {category}")
        blogs = blog_queryset().filter(category=category)
        return JsonResponse({
            "success": True,
            "count": len(blogs),
            "blogs": [blog_dict(blog) for blog in blogs],
        })


class BlogDetailView(ApiView):
    """A single blog, with the viewer's like/favorite state when signed in."""

    def get(self, request, pk):
        blog = get_or_not_found(blog_queryset(), pk)
        return JsonResponse({"success": True, "blog": blog_dict(blog, request.user)})


class UserBlogListView(ApiView):
    """A user's public profile stats and blogs."""

    def get(self, request, pk):
        user = get_or_not_found(get_user_model().objects.all(), pk)
        blogs = blog_queryset().filter(user=user)
        return JsonResponse({
            "success": True,
            "user": user_dict(user),
            "stats": profiles.blog_stats(user),
            "blogs": [blog_dict(blog) for blog in blogs],
        })


class UserStatsView(ApiView):
    """Blog statistics for the requesting user."""

    login_required = True

    def get(self, request):
        stats = profiles.blog_stats(request.user)
        stats["popular_blogs"] = [
            blog_dict(blog) for blog in profiles.popular_blogs(request.user)
        ]
        return JsonResponse({
            "success": True,
            "message": "User blog statistics retrieved successfully",
            "stats": stats,
        })


class BlogWriteMixin:
    """Shared parsing of blog form fields and image uploads."""

    def image_from_request(self, files, data):
        """
        Return (reference, stored) for a new upload or an image field.

        An image field may only name a URL or a data URI; storage paths
        come from uploads made by this request.
        """
        upload = files.get("image")
        if upload is not None:
            return storage.save_image(upload, prefix="blog"), True
        ref = data.get("image") or None
        if ref and storage.classify_reference(ref) == storage.PATH:
            raise ValidationFailed("Image must be an upload, a URL or a data URI")
        return ref, False

    def description_from(self, data):
        description = data.get("description")
        if description:
            return sanitize_description(description)
        return description


class BlogCreateView(BlogWriteMixin, ApiView):
    """Create a blog owned by the requesting user."""

    login_required = True

    def post(self, request):
        data, files = request_payload(request)
        description = self.description_from(data)
        image, stored = self.image_from_request(files, data)
        try:
            blog = lifecycle.create_blog(
                request.user,
                title=data.get("title"),
                description=description,
                image=image,
                category=data.get("category"),
                excerpt=data.get("excerpt"),
            )
        except BlogHubError:
            if stored:
                storage.delete_image(image)
            raise

        return JsonResponse(
            {
                "success": True,
                "message": "Blog Created Successfully!",
                "blog": blog_dict(blog),
            },
            status=201,
        )


class BlogUpdateView(BlogWriteMixin, ApiView):
    """Edit an owned blog."""

    login_required = True

    def put(self, request, pk):
        data, files = request_payload(request)
        description = self.description_from(data)
        image, stored = self.image_from_request(files, data)
        try:
            blog = lifecycle.update_blog(
                pk,
                request.user,
                title=data.get("title"),
                description=description,
                category=data.get("category"),
                excerpt=data.get("excerpt"),
                image=image,
            )
        except BlogHubError:
            if stored:
                storage.delete_image(image)
            raise

        return JsonResponse({
            "success": True,
            "message": "Blog Updated Successfully!",
            "blog": blog_dict(blog),
        })

    post = put


class BlogDeleteView(ApiView):
    """Delete an owned blog."""

    login_required = True

    def delete(self, request, pk):
        lifecycle.delete_blog(pk, request.user)
        return JsonResponse({"success": True, "message": "Blog Deleted Successfully!"})

    post = delete


class BlogLikeView(ApiView):
    """Toggle the requesting user's like on a blog."""

    login_required = True

    def post(self, request, pk):
        result = engagement.toggle_like(pk, request.user)
        return JsonResponse({
            "success": True,
            "message": "Blog liked successfully" if result.active else "Blog unliked successfully",
            "likes_count": result.count,
            "is_liked": result.active,
        })


class BlogFavoriteView(ApiView):
    """Toggle the requesting user's favorite on a blog."""

    login_required = True

    def post(self, request, pk):
        result = engagement.toggle_favorite(pk, request.user)
        return JsonResponse({
            "success": True,
            "message": "Added to favorites" if result.active else "Removed from favorites",
            "favorites_count": result.count,
            "is_favorited": result.active,
        })


class EditorImageUploadView(ApiView):
    """Store an image embedded in a blog description."""

    login_required = True

    def post(self, request):
        upload = request.FILES.get("image")
        if upload is None:
            raise ValidationFailed("No image file provided")
        ref = storage.save_image(
            upload,
            prefix="editor",
            max_size_mb=blog_settings.EDITOR_IMAGE_MAX_SIZE_MB,
        )
        return JsonResponse({
            "success": True,
            "message": "Image uploaded successfully",
            "image_url": ref,
        })


class CommentCreateView(ApiView):
    """Add a comment or reply to a blog."""

    login_required = True

    def post(self, request):
        data = request_data(request)
        blog_id = data.get("blog_id")
        if not blog_id:
            raise ValidationFailed("Content and blog_id are required")
        comment = comment_tree.add_comment(
            blog_id,
            request.user,
            data.get("content"),
            parent_comment_id=data.get("parent_comment_id"),
        )
        return JsonResponse(
            {
                "success": True,
                "message": "Comment added successfully",
                "comment": comment_dict(comment),
            },
            status=201,
        )


class CommentListView(ApiView):
    """Threaded comments for a blog."""

    def get(self, request, blog_pk):
        comments = comment_tree.list_comments(blog_pk)
        return JsonResponse({
            "success": True,
            "comments": [comment_dict(c, with_replies=True) for c in comments],
        })


class CommentDetailView(ApiView):
    """Edit or delete an owned comment."""

    login_required = True

    def put(self, request, pk):
        data = request_data(request)
        comment = comment_tree.update_comment(pk, request.user, data.get("content"))
        return JsonResponse({
            "success": True,
            "message": "Comment updated successfully",
            "comment": comment_dict(comment),
        })

    def delete(self, request, pk):
        removed = comment_tree.delete_comment(pk, request.user)
        return JsonResponse({
            "success": True,
            "message": "Comment deleted successfully",
            "removed": removed,
        })


class CommentLikeView(ApiView):
    """Toggle the requesting user's like on a comment."""

    login_required = True

    def post(self, request, pk):
        result = comment_tree.toggle_comment_like(pk, request.user)
        return JsonResponse({
            "success": True,
            "message": "Comment liked" if result.active else "Comment unliked",
            "likes_count": result.count,
            "is_liked": result.active,
        })


class TokenObtainView(ApiView):
    """Exchange username and password for a bearer token."""

    def post(self, request):
        data = request_data(request)
        user = authenticate(
            request,
            username=data.get("username"),
            password=data.get("password"),
        )
        if user is None:
            raise Unauthorized("Invalid username or password")
        return JsonResponse({"success": True, "token": issue_token(user)})


def profile_dict(profile, private=False):
    user = profile.user
    data = {
        "id": user.pk,
        "username": user.get_username(),
        "display_name": profile.display_name,
        "bio": profile.bio,
        "avatar": profile.avatar,
        "website": profile.website,
        "location": profile.location,
        "social": {
            "twitter": profile.twitter,
            "linkedin": profile.linkedin,
            "github": profile.github,
        },
        "join_date": profile.formatted_join_date,
    }
    if private or profile.show_email:
        data["email"] = user.email
    if private:
        data["preferences"] = {
            name: getattr(profile, name) for name in profiles.PREFERENCE_FIELDS
        }
    return data


class ProfileView(ApiView):
    """Read or edit the requesting user's profile."""

    login_required = True

    def get(self, request):
        profile = profiles.get_profile(request.user)
        return JsonResponse({
            "success": True,
            "user": profile_dict(profile, private=True),
            "stats": profiles.blog_stats(request.user),
        })

    def put(self, request):
        data = request_data(request)
        changes = {name: data[name] for name in profiles.EDITABLE_FIELDS if name in data}
        for group in ("social", "preferences"):
            nested = data.get(group) or {}
            if not isinstance(nested, dict):
                raise ValidationFailed(f"{group} must be an object")
            changes.update(nested)
        profile = profiles.update_profile(request.user, changes)
        return JsonResponse({
            "success": True,
            "message": "Profile updated successfully",
            "user": profile_dict(profile, private=True),
        })


class ProfilePictureView(ApiView):
    """Upload a new avatar for the requesting user."""

    login_required = True

    def post(self, request):
        profile = profiles.set_avatar(request.user, request.FILES.get("avatar"))
        return JsonResponse({
            "success": True,
            "message": "Profile picture updated successfully",
            "avatar": profile.avatar,
        })


class PublicProfileView(ApiView):
    """Anyone's public profile with their blogs."""

    def get(self, request, pk):
        profile = profiles.public_profile(pk)
        blogs = blog_queryset().filter(user=profile.user)
        return JsonResponse({
            "success": True,
            "user": profile_dict(profile),
            "stats": profiles.blog_stats(profile.user),
            "blogs": [blog_dict(blog) for blog in blogs],
        })
