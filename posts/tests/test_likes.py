from datetime import timedelta
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone

from myapp.exceptions import NotFoundError
from myapp.testing import make_post, make_user
from posts.models import Like, Post
from posts.services import likes


class ToggleLikeTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.bob = make_user(username="bob")
        self.post = make_post(self.alice, status=Post.PUBLISHED)

    def test_toggle_is_idempotent_in_pairs(self):
        self.assertEqual(likes.toggle_like(self.post.id, self.bob.id), (True, 1))
        self.assertEqual(likes.toggle_like(self.post.id, self.bob.id), (False, 0))
        self.assertFalse(Like.objects.exists())

    def test_counts_every_user(self):
        likes.toggle_like(self.post.id, self.bob.id)
        self.assertEqual(likes.toggle_like(self.post.id, self.alice.id), (True, 2))

    def test_racing_insert_counts_as_liked(self):
        with patch.object(
            Like.objects, "create", side_effect=IntegrityError("duplicate key")
        ):
            liked, count = likes.toggle_like(self.post.id, self.bob.id)
        self.assertTrue(liked)
        self.assertEqual(count, Like.objects.filter(post=self.post).count())

    def test_missing_post(self):
        with self.assertRaises(NotFoundError):
            likes.toggle_like(999999, self.bob.id)


class LikeStatusTest(TestCase):
    def setUp(self):
        self.alice = make_user(username="alice")
        self.post = make_post(self.alice, status=Post.PUBLISHED)

    def test_anonymous_never_liked(self):
        self.assertFalse(likes.like_status(self.post.id))

    def test_status_follows_toggle(self):
        self.assertFalse(likes.like_status(self.post.id, self.alice.id))
        likes.toggle_like(self.post.id, self.alice.id)
        self.assertTrue(likes.like_status(self.post.id, self.alice.id))

    def test_likers_newest_first(self):
        users = [make_user() for _ in range(3)]
        base = timezone.now()
        for offset, user in enumerate(users):
            likes.toggle_like(self.post.id, user.id)
            Like.objects.filter(post=self.post, user=user).update(
                created_at=base + timedelta(minutes=offset)
            )
        likers, pagination = likes.list_likers(self.post.id, limit=2)
        self.assertEqual([u.id for u in likers], [users[2].id, users[1].id])
        self.assertEqual(pagination["total"], 3)
        self.assertEqual(pagination["pages"], 2)
