from django.test import TestCase

from myapp.exceptions import AuthorizationError, NotFoundError, ValidationError
from myapp.testing import claims_for, make_post, make_user
from posts.models import Comment, Like, Post
from posts.services import lifecycle
from users.models import User


class CreatePostTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")

    def test_draft_by_default_with_derived_excerpt(self):
        post = lifecycle.create_post(self.alice.id, "Hello", "World")
        self.assertEqual(post.status, Post.DRAFT)
        self.assertIsNone(post.published_at)
        self.assertEqual(post.excerpt, "World")
        self.assertEqual(post.like_count, 0)
        self.assertEqual(post.comment_count, 0)

    def test_create_published(self):
        post = lifecycle.create_post(self.alice.id, "Hello", "World", status="published")
        self.assertIsNotNone(post.published_at)

    def test_validation(self):
        with self.assertRaises(ValidationError):
            lifecycle.create_post(self.alice.id, "", "World")
        with self.assertRaises(ValidationError):
            lifecycle.create_post(self.alice.id, "Hello", "   ")
        with self.assertRaises(ValidationError):
            lifecycle.create_post(self.alice.id, "x" * 256, "World")
        with self.assertRaises(ValidationError):
            lifecycle.create_post(self.alice.id, "Hello", "World", excerpt="x" * 501)
        with self.assertRaises(ValidationError):
            lifecycle.create_post(self.alice.id, "Hello", "World", status="archived")
        with self.assertRaises(ValidationError):
            lifecycle.create_post(
                self.alice.id,
                "Hello",
                "World",
                featured_image="https://example.com/" + "x" * 500,
            )
        self.assertFalse(Post.objects.exists())

    def test_author_must_exist(self):
        with self.assertRaises(NotFoundError):
            lifecycle.create_post(999999, "Hello", "World")


class GetPostTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.bob = make_user(username="bob")
        self.post = make_post(self.alice, status=Post.PUBLISHED)

    def test_each_fetch_counts_a_view(self):
        lifecycle.get_post(self.post.id)
        post = lifecycle.get_post(self.post.id, self.alice.id)
        self.assertEqual(post.views_count, 2)

    def test_user_liked(self):
        Like.objects.create(user=self.bob, post=self.post)
        self.assertTrue(lifecycle.get_post(self.post.id, self.bob.id).user_liked)
        self.assertFalse(lifecycle.get_post(self.post.id, self.alice.id).user_liked)
        self.assertFalse(lifecycle.get_post(self.post.id).user_liked)

    def test_missing_post(self):
        with self.assertRaises(NotFoundError):
            lifecycle.get_post(999999)


class ListPostsTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.bob = make_user(username="bob")
        self.published = make_post(self.alice, status=Post.PUBLISHED, title="Django tips")
        self.alice_draft = make_post(self.alice, status=Post.DRAFT, title="Secret")
        self.bob_draft = make_post(self.bob, status=Post.DRAFT, title="Bob draft")

    def test_anonymous_sees_published_only(self):
        items, pagination = lifecycle.list_posts(status="all")
        self.assertEqual([p.id for p in items], [self.published.id])
        self.assertEqual(pagination["total"], 1)
        items, _ = lifecycle.list_posts(status="draft")
        self.assertEqual(items, [])

    def test_drafts_listed_only_for_their_author(self):
        items, _ = lifecycle.list_posts(status="draft", viewer_id=self.alice.id)
        self.assertEqual([p.id for p in items], [self.alice_draft.id])
        items, _ = lifecycle.list_posts(status="all", viewer_id=self.alice.id)
        self.assertEqual(
            {p.id for p in items}, {self.published.id, self.alice_draft.id}
        )

    def test_search_is_case_insensitive(self):
        items, _ = lifecycle.list_posts(search="DJANGO")
        self.assertEqual([p.id for p in items], [self.published.id])

    def test_popular_sort(self):
        other = make_post(self.bob, status=Post.PUBLISHED)
        Post.objects.filter(pk=other.pk).update(views_count=10)
        items, _ = lifecycle.list_posts(sort="popular")
        self.assertEqual(items[0].id, other.id)

    def test_pagination_clamps(self):
        for _ in range(3):
            make_post(self.bob, status=Post.PUBLISHED)
        items, pagination = lifecycle.list_posts(page=0, limit=2)
        self.assertEqual(len(items), 2)
        self.assertEqual(
            pagination, {"total": 4, "pages": 2, "current_page": 1, "limit": 2}
        )
        items, pagination = lifecycle.list_posts(page=5, limit=2)
        self.assertEqual(items, [])

    def test_user_posts_hide_drafts_from_others(self):
        items, _ = lifecycle.list_user_posts(self.alice.id, status="all", viewer_id=self.bob.id)
        self.assertEqual([p.id for p in items], [self.published.id])
        items, _ = lifecycle.list_user_posts(self.alice.id, status="all", viewer_id=self.alice.id)
        self.assertEqual(len(items), 2)

    def test_user_posts_unknown_user(self):
        with self.assertRaises(NotFoundError):
            lifecycle.list_user_posts(999999)


class UpdatePostTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.bob = make_user(username="bob")
        self.admin = make_user(username="boss", role=User.ADMIN)
        self.post = make_post(self.alice, content="Original content")

    def test_partial_update(self):
        post = lifecycle.update_post(self.post.id, claims_for(self.alice), {"title": "New"})
        self.assertEqual(post.title, "New")
        self.assertEqual(post.content, "Original content")

    def test_empty_excerpt_is_rederived(self):
        post = lifecycle.update_post(
            self.post.id, claims_for(self.alice), {"content": "Fresh", "excerpt": ""}
        )
        self.assertEqual(post.excerpt, "Fresh")

    def test_publish_monotonicity(self):
        claims = claims_for(self.alice)
        first = lifecycle.update_post(self.post.id, claims, {"status": "published"}).published_at
        lifecycle.update_post(self.post.id, claims, {"status": "draft"})
        again = lifecycle.update_post(self.post.id, claims, {"status": "published"})
        self.assertEqual(again.published_at, first)

    def test_non_owner_rejected_regardless_of_role(self):
        for actor in (self.bob, self.admin):
            with self.assertRaises(AuthorizationError):
                lifecycle.update_post(self.post.id, claims_for(actor), {"title": "x"})

    def test_existence_checked_before_ownership(self):
        with self.assertRaises(NotFoundError):
            lifecycle.update_post(999999, claims_for(self.bob), {"title": "x"})

    def test_ownership_checked_before_payload(self):
        with self.assertRaises(AuthorizationError):
            lifecycle.update_post(self.post.id, claims_for(self.bob), {"status": "bogus"})

    def test_oversized_featured_image(self):
        with self.assertRaises(ValidationError):
            lifecycle.update_post(
                self.post.id,
                claims_for(self.alice),
                {"featured_image": "https://example.com/" + "x" * 500},
            )
        self.post.refresh_from_db()
        self.assertIsNone(self.post.featured_image)

    def test_invalid_status(self):
        with self.assertRaises(ValidationError):
            lifecycle.update_post(self.post.id, claims_for(self.alice), {"status": "bogus"})


class DeleteCascadeTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.bob = make_user(username="bob")
        self.post = make_post(self.alice, status=Post.PUBLISHED)
        comment = Comment.objects.create(post=self.post, author=self.bob, content="c")
        Comment.objects.create(post=self.post, author=self.alice, content="r", parent=comment)
        Like.objects.create(post=self.post, user=self.bob)

    def test_delete_post_removes_comments_and_likes(self):
        lifecycle.delete_post(self.post.id, claims_for(self.alice))
        self.assertFalse(Post.objects.filter(pk=self.post.id).exists())
        self.assertFalse(Comment.objects.filter(post_id=self.post.id).exists())
        self.assertFalse(Like.objects.filter(post_id=self.post.id).exists())

    def test_non_owner_cannot_delete(self):
        with self.assertRaises(AuthorizationError):
            lifecycle.delete_post(self.post.id, claims_for(self.bob))
        self.assertTrue(Post.objects.filter(pk=self.post.id).exists())

    def test_delete_user_removes_everything_they_touched(self):
        bobs_post = make_post(self.bob, status=Post.PUBLISHED)
        Comment.objects.create(post=bobs_post, author=self.alice, content="on bob's post")
        Like.objects.create(post=bobs_post, user=self.alice)

        lifecycle.delete_user(self.alice)

        self.assertFalse(User.objects.filter(pk=self.alice.id).exists())
        self.assertFalse(Post.objects.filter(author_id=self.alice.id).exists())
        self.assertFalse(Comment.objects.filter(post_id=self.post.id).exists())
        self.assertFalse(Comment.objects.filter(author_id=self.alice.id).exists())
        self.assertFalse(Like.objects.filter(user_id=self.alice.id).exists())
        self.assertTrue(Post.objects.filter(pk=bobs_post.id).exists())
