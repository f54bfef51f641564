"""
URL configuration for django-blog-hub.

Include in your project urls.py:

    path('api/v1/', include('blog_hub.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_hub"

urlpatterns = [
    # Blog reads
    path("blogs/", views.BlogListView.as_view(), name="blog_list"),
    path("blogs/popular/", views.PopularBlogListView.as_view(), name="blog_popular"),
    path("blogs/category/<str:category>/", views.CategoryBlogListView.as_view(), name="blog_category"),
    path("blogs/<int:pk>/", views.BlogDetailView.as_view(), name="blog_detail"),
    path("users/<int:pk>/blogs/", views.UserBlogListView.as_view(), name="user_blogs"),
    path("blogs/user-stats/", views.UserStatsView.as_view(), name="user_stats"),

    # Blog writes
    path("blogs/new/", views.BlogCreateView.as_view(), name="blog_create"),
    path("blogs/<int:pk>/edit/", views.BlogUpdateView.as_view(), name="blog_update"),
    path("blogs/<int:pk>/delete/", views.BlogDeleteView.as_view(), name="blog_delete"),
    path("blogs/editor-image/", views.EditorImageUploadView.as_view(), name="editor_image"),

    # Engagement
    path("blogs/<int:pk>/like/", views.BlogLikeView.as_view(), name="blog_like"),
    path("blogs/<int:pk>/favorite/", views.BlogFavoriteView.as_view(), name="blog_favorite"),

    # Comments
    path("comments/", views.CommentCreateView.as_view(), name="comment_create"),
    path("comments/blog/<int:blog_pk>/", views.CommentListView.as_view(), name="comment_list"),
    path("comments/<int:pk>/", views.CommentDetailView.as_view(), name="comment_detail"),
    path("comments/<int:pk>/like/", views.CommentLikeView.as_view(), name="comment_like"),

    # Profiles
    path("profile/", views.ProfileView.as_view(), name="profile"),
    path("profile/picture/", views.ProfilePictureView.as_view(), name="profile_picture"),
    path("profile/<int:pk>/", views.PublicProfileView.as_view(), name="public_profile"),

    # Auth
    path("auth/token/", views.TokenObtainView.as_view(), name="token_obtain"),
]
