"""
Tests for comment threads and the blog comment count.
"""
import pytest

from blog_hub.exceptions import Forbidden, NotFound, ValidationFailed
from blog_hub.models import Blog, Comment
from blog_hub.services import comment_tree


def live_top_level(blog):
    return Comment.objects.filter(blog=blog, parent_comment__isnull=True).count()


class TestAddComment:
    """Tests for add_comment."""

    def test_top_level_comment_recounts(self, db, blog, other_user):
        comment_tree.add_comment(blog.pk, other_user, "First!")
        blog.refresh_from_db()
        assert blog.comment_count == 1 == live_top_level(blog)

    def test_reply_does_not_change_count(self, db, blog, user, other_user):
        parent = comment_tree.add_comment(blog.pk, user, "Parent")
        reply = comment_tree.add_comment(blog.pk, other_user, "Reply", parent.pk)

        blog.refresh_from_db()
        assert reply.parent_comment == parent
        assert blog.comment_count == 1

    def test_recount_heals_drift(self, db, blog, user):
        comment_tree.add_comment(blog.pk, user, "One")
        Blog.objects.filter(pk=blog.pk).update(comment_count=40)

        comment_tree.add_comment(blog.pk, user, "Two")
        blog.refresh_from_db()
        assert blog.comment_count == 2

    def test_content_is_stripped(self, db, blog, user):
        comment = comment_tree.add_comment(blog.pk, user, "  padded  ")
        assert comment.content == "padded"

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_content(self, db, blog, user, content):
        with pytest.raises(ValidationFailed):
            comment_tree.add_comment(blog.pk, user, content)

    def test_missing_blog(self, db, user):
        with pytest.raises(NotFound):
            comment_tree.add_comment(999999, user, "Hello")

    def test_parent_from_other_blog(self, db, blog, user):
        other_blog = Blog.objects.create(
            title="Other", description="body", image="data:image/png;base64,AAAA", user=user
        )
        parent = comment_tree.add_comment(other_blog.pk, user, "Elsewhere")
        with pytest.raises(NotFound):
            comment_tree.add_comment(blog.pk, user, "Reply", parent.pk)


class TestListComments:
    """Tests for list_comments ordering."""

    def test_ordering(self, db, blog, user, other_user):
        first = comment_tree.add_comment(blog.pk, user, "first")
        second = comment_tree.add_comment(blog.pk, user, "second")
        reply_a = comment_tree.add_comment(blog.pk, other_user, "reply a", first.pk)
        reply_b = comment_tree.add_comment(blog.pk, user, "reply b", first.pk)

        comments = comment_tree.list_comments(blog.pk)

        assert [c.pk for c in comments] == [second.pk, first.pk]
        assert [r.pk for r in comments[1].replies.all()] == [reply_a.pk, reply_b.pk]
        assert list(comments[0].replies.all()) == []


class TestDeleteComment:
    """Tests for delete_comment."""

    def test_cascades_to_replies(self, db, blog, user, other_user):
        parent = comment_tree.add_comment(blog.pk, user, "X")
        for i in range(3):
            comment_tree.add_comment(blog.pk, other_user, f"reply {i}", parent.pk)
        comment_tree.add_comment(blog.pk, other_user, "unrelated")
        before = Comment.objects.count()

        removed = comment_tree.delete_comment(parent.pk, user)

        assert removed == 4
        assert Comment.objects.count() == before - 4
        blog.refresh_from_db()
        assert blog.comment_count == 1 == live_top_level(blog)

    def test_reply_and_parent_scenario(self, db, blog, user, other_user):
        x = comment_tree.add_comment(blog.pk, user, "X")
        y = comment_tree.add_comment(blog.pk, other_user, "Y", x.pk)
        blog.refresh_from_db()
        assert blog.comment_count == 1

        comment_tree.delete_comment(x.pk, user)

        assert not Comment.objects.filter(pk__in=[x.pk, y.pk]).exists()
        blog.refresh_from_db()
        assert blog.comment_count == 0

    def test_delete_reply_only(self, db, blog, user, other_user):
        x = comment_tree.add_comment(blog.pk, user, "X")
        y = comment_tree.add_comment(blog.pk, other_user, "Y", x.pk)

        assert comment_tree.delete_comment(y.pk, other_user) == 1
        assert Comment.objects.filter(pk=x.pk).exists()
        blog.refresh_from_db()
        assert blog.comment_count == 1

    def test_non_author_forbidden(self, db, blog, user, other_user):
        comment = comment_tree.add_comment(blog.pk, user, "Mine")
        with pytest.raises(Forbidden):
            comment_tree.delete_comment(comment.pk, other_user)
        assert Comment.objects.filter(pk=comment.pk).exists()

    def test_missing(self, db, user):
        with pytest.raises(NotFound):
            comment_tree.delete_comment(999999, user)


class TestUpdateComment:
    """Tests for update_comment."""

    def test_update(self, db, blog, user):
        comment = comment_tree.add_comment(blog.pk, user, "Before")
        updated = comment_tree.update_comment(comment.pk, user, "After")
        assert updated.content == "After"
        assert updated.is_edited

    def test_non_author_forbidden(self, db, blog, user, other_user):
        comment = comment_tree.add_comment(blog.pk, user, "Before")
        with pytest.raises(Forbidden):
            comment_tree.update_comment(comment.pk, other_user, "Hijacked")
        comment.refresh_from_db()
        assert comment.content == "Before"
        assert not comment.is_edited

    def test_blank_content(self, db, blog, user):
        comment = comment_tree.add_comment(blog.pk, user, "Before")
        with pytest.raises(ValidationFailed):
            comment_tree.update_comment(comment.pk, user, " ")


class TestToggleCommentLike:
    """Tests for toggle_comment_like."""

    def test_toggle(self, db, blog, user, other_user):
        comment = comment_tree.add_comment(blog.pk, user, "Like me")

        result = comment_tree.toggle_comment_like(comment.pk, other_user)
        assert result.active is True
        assert result.count == 1

        result = comment_tree.toggle_comment_like(comment.pk, user)
        assert result.count == 2

        result = comment_tree.toggle_comment_like(comment.pk, other_user)
        assert result.active is False
        assert result.count == 1
        assert comment.likes_count == 1

    def test_missing(self, db, user):
        with pytest.raises(NotFound):
            comment_tree.toggle_comment_like(999999, user)


class TestThreadDepth:
    """Threads never grow past two levels."""

    def test_reply_to_reply_joins_thread(self, db, blog, user, other_user):
        top = comment_tree.add_comment(blog.pk, user, "Top")
        reply = comment_tree.add_comment(blog.pk, other_user, "Reply", top.pk)
        nested = comment_tree.add_comment(blog.pk, user, "Reply to reply", reply.pk)

        assert nested.parent_comment_id == top.pk
        comments = comment_tree.list_comments(blog.pk)
        assert [r.pk for r in comments[0].replies.all()] == [reply.pk, nested.pk]

    def test_removed_counts_cascaded_rows(self, db, blog, user, other_user):
        top = comment_tree.add_comment(blog.pk, user, "Top")
        reply = comment_tree.add_comment(blog.pk, other_user, "Reply", top.pk)
        # A three-level row written around the service still counts
        Comment.objects.create(blog=blog, user=user, content="Deep", parent_comment=reply)

        assert comment_tree.delete_comment(top.pk, user) == 3
        assert not Comment.objects.exists()
