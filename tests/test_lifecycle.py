"""
Tests for blog create, update and delete.
"""
import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import DatabaseError

from blog_hub.exceptions import Forbidden, NotFound, ServerError, Unauthorized, ValidationFailed
from blog_hub.models import Blog, Comment, Profile
from blog_hub.services import comment_tree, engagement, lifecycle

COVER = "https://example.com/cover.png"


def blog_count(user):
    return Profile.objects.get(user=user).blog_count


def stored_file(name):
    """Put a file in default storage and return its path reference."""
    saved = default_storage.save(f"uploads/{name}", ContentFile(b"image-bytes"))
    return "/" + saved


class TestCreateBlog:
    """Tests for create_blog."""

    def test_create(self, db, user):
        blog = lifecycle.create_blog(
            user,
            title="Hello, World! 2024",
            description=" ".join(["word"] * 400),
            image=COVER,
        )
        assert blog.user == user
        assert blog.slug == "hello-world-2024"
        assert blog.reading_time == 2
        assert blog.category == "technology"
        assert list(user.blogs.all()) == [blog]
        assert blog_count(user) == 1

    def test_supplied_category_and_excerpt(self, db, user):
        blog = lifecycle.create_blog(
            user, "Title", "Some description", COVER, category="health", excerpt="Short"
        )
        assert blog.category == "health"
        assert blog.excerpt == "Short"

    @pytest.mark.parametrize("field", ["title", "description", "image"])
    def test_required_fields(self, db, user, field):
        kwargs = {"title": "Title", "description": "Description", "image": COVER}
        kwargs[field] = ""
        with pytest.raises(ValidationFailed):
            lifecycle.create_blog(user, **kwargs)
        assert Blog.objects.count() == 0
        assert blog_count(user) == 0

    def test_unknown_category(self, db, user):
        with pytest.raises(ValidationFailed):
            lifecycle.create_blog(user, "Title", "Description", COVER, category="cooking")

    def test_excerpt_too_long(self, db, user):
        with pytest.raises(ValidationFailed):
            lifecycle.create_blog(user, "Title", "Description", COVER, excerpt="e" * 201)

    def test_requires_actor(self, db):
        with pytest.raises(Unauthorized):
            lifecycle.create_blog(AnonymousUser(), "Title", "Description", COVER)

    def test_failed_index_write_rolls_back(self, db, user, monkeypatch):
        def boom(owner):
            raise DatabaseError("profile write failed")

        monkeypatch.setattr("blog_hub.services.lifecycle.Profile.for_user", boom)

        with pytest.raises(ServerError):
            lifecycle.create_blog(user, "Title", "Description", COVER)
        assert Blog.objects.count() == 0
        assert blog_count(user) == 0


class TestUpdateBlog:
    """Tests for update_blog."""

    def test_update_fields(self, db, blog, user):
        updated = lifecycle.update_blog(
            blog.pk, user, title="New Title", category="sports", excerpt="New excerpt"
        )
        assert updated.title == "New Title"
        assert updated.category == "sports"
        assert updated.excerpt == "New excerpt"
        assert updated.slug == "test-blog"

    def test_empty_values_keep_current(self, db, blog, user):
        updated = lifecycle.update_blog(blog.pk, user, title="", description="")
        assert updated.title == blog.title
        assert updated.description == blog.description

    def test_description_change_rederives_reading_time(self, db, blog, user):
        updated = lifecycle.update_blog(blog.pk, user, description=" ".join(["w"] * 401))
        assert updated.reading_time == 3

    def test_non_owner_forbidden(self, db, blog, other_user):
        with pytest.raises(Forbidden):
            lifecycle.update_blog(blog.pk, other_user, title="Hijacked")
        blog.refresh_from_db()
        assert blog.title == "Test Blog"

    def test_missing(self, db, user):
        with pytest.raises(NotFound):
            lifecycle.update_blog(999999, user, title="Nope")

    def test_anonymous(self, db, blog):
        with pytest.raises(Unauthorized):
            lifecycle.update_blog(blog.pk, AnonymousUser(), title="Nope")

    def test_replacing_stored_image_deletes_old_file(
        self, db, user, django_capture_on_commit_callbacks
    ):
        old_ref = stored_file("old.png")
        blog = lifecycle.create_blog(user, "Title", "Description", old_ref)

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle.update_blog(blog.pk, user, image=COVER)

        assert not default_storage.exists(old_ref.lstrip("/"))

    def test_replacing_data_uri_keeps_nothing_to_delete(
        self, db, user, django_capture_on_commit_callbacks
    ):
        blog = lifecycle.create_blog(user, "Title", "Description", "data:image/png;base64,AAAA")

        with django_capture_on_commit_callbacks(execute=True):
            updated = lifecycle.update_blog(blog.pk, user, image=COVER)

        assert updated.image == COVER


class TestDeleteBlog:
    """Tests for delete_blog."""

    def test_delete(self, db, blog, user, django_capture_on_commit_callbacks):
        assert blog_count(user) == 1

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle.delete_blog(blog.pk, user)

        assert not Blog.objects.filter(pk=blog.pk).exists()
        assert blog_count(user) == 0
        assert not user.blogs.exists()

    def test_blog_count_floors_at_zero(self, db, blog, user):
        Profile.objects.filter(user=user).update(blog_count=0)
        lifecycle.delete_blog(blog.pk, user)
        assert blog_count(user) == 0

    def test_comments_are_removed(self, db, blog, user, other_user):
        parent = comment_tree.add_comment(blog.pk, other_user, "Top")
        comment_tree.add_comment(blog.pk, user, "Reply", parent.pk)

        lifecycle.delete_blog(blog.pk, user)

        assert not Comment.objects.filter(blog_id=blog.pk).exists()

    def test_deletes_stored_image(self, db, user, django_capture_on_commit_callbacks):
        ref = stored_file("cover.png")
        blog = lifecycle.create_blog(user, "Title", "Description", ref)

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle.delete_blog(blog.pk, user)

        assert not default_storage.exists(ref.lstrip("/"))

    def test_non_owner_forbidden(self, db, blog, user, other_user):
        with pytest.raises(Forbidden):
            lifecycle.delete_blog(blog.pk, other_user)
        assert Blog.objects.filter(pk=blog.pk).exists()
        assert blog_count(user) == 1

    def test_missing(self, db, user):
        with pytest.raises(NotFound):
            lifecycle.delete_blog(999999, user)


def test_favorite_scenario(db, user, other_user):
    """Owner creates a blog, a reader favorites and unfavorites it, owner deletes it."""
    assert blog_count(user) == 0
    blog = lifecycle.create_blog(user, "Scenario", "A description", COVER)
    assert blog_count(user) == 1

    result = engagement.toggle_favorite(blog.pk, other_user)
    assert result.count == 1
    assert list(other_user.favorite_blogs.all()) == [blog]

    result = engagement.toggle_favorite(blog.pk, other_user)
    assert result.count == 0
    assert not other_user.favorite_blogs.exists()

    lifecycle.delete_blog(blog.pk, user)
    assert blog_count(user) == 0
    assert not user.blogs.exists()


class TestSharedImages:
    """Stored images are only removed once nothing references them."""

    def test_shared_path_survives_other_blog_delete(
        self, db, user, other_user, django_capture_on_commit_callbacks
    ):
        ref = stored_file("shared.png")
        lifecycle.create_blog(user, "Owner", "Description", ref)
        borrowed = lifecycle.create_blog(other_user, "Borrower", "Description", ref)

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle.delete_blog(borrowed.pk, other_user)

        assert default_storage.exists(ref.lstrip("/"))

    def test_avatar_path_survives_cover_replacement(
        self, db, user, django_capture_on_commit_callbacks
    ):
        ref = stored_file("avatar.png")
        Profile.objects.filter(user=user).update(avatar=ref)
        blog = lifecycle.create_blog(user, "Title", "Description", ref)

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle.update_blog(blog.pk, user, image=COVER)

        assert default_storage.exists(ref.lstrip("/"))

    def test_release_ignores_external_references(self, db):
        assert lifecycle.release_image(COVER) is False
        assert lifecycle.release_image("data:image/png;base64,AAAA") is False
