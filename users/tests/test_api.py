from django.test import TestCase

from myapp.testing import api_client, auth_headers, make_post, make_user
from posts.models import Post


class UserProfileAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client()
        self.user = make_user(username="alice", full_name="Alice")
        self.other = make_user(username="bob")

    def test_profile_counts_published_posts_only(self):
        for _ in range(6):
            make_post(self.user, status=Post.PUBLISHED)
        make_post(self.user, status=Post.DRAFT)

        response = self.client.get(f"/users/{self.user.id}")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["username"], "alice")
        self.assertEqual(data["post_count"], 6)
        self.assertEqual(len(data["recent_posts"]), 5)

    def test_unknown_profile(self):
        response = self.client.get("/users/999999")
        self.assertEqual(response.status_code, 404)

    def test_update_own_profile(self):
        response = self.client.put(
            f"/users/{self.user.id}",
            json={"bio": "Down the rabbit hole"},
            headers=auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "Down the rabbit hole")
        self.assertEqual(self.user.full_name, "Alice")

    def test_update_rejects_oversized_fields(self):
        for field, value in (
            ("full_name", "A" * 101),
            ("avatar_url", "https://example.com/" + "x" * 500),
        ):
            response = self.client.put(
                f"/users/{self.user.id}",
                json={field: value},
                headers=auth_headers(self.user),
            )
            self.assertEqual(response.status_code, 400)
        self.user.refresh_from_db()
        self.assertEqual(self.user.full_name, "Alice")
        self.assertIsNone(self.user.avatar_url)

    def test_update_someone_elses_profile(self):
        response = self.client.put(
            f"/users/{self.user.id}",
            json={"bio": "hijacked"},
            headers=auth_headers(self.other),
        )
        self.assertEqual(response.status_code, 403)


class ChangePasswordAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client()
        self.user = make_user(username="alice", password="Passw0rd1")
        self.url = f"/users/{self.user.id}/password"

    def test_change_password(self):
        response = self.client.put(
            self.url,
            json={
                "current_password": "Passw0rd1",
                "new_password": "N3wPassword",
                "confirm_password": "N3wPassword",
            },
            headers=auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("N3wPassword"))

    def test_mismatched_confirmation(self):
        response = self.client.put(
            self.url,
            json={
                "current_password": "Passw0rd1",
                "new_password": "N3wPassword",
                "confirm_password": "Different1",
            },
            headers=auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 400)

    def test_wrong_current_password(self):
        response = self.client.put(
            self.url,
            json={
                "current_password": "Wrong0ne1",
                "new_password": "N3wPassword",
                "confirm_password": "N3wPassword",
            },
            headers=auth_headers(self.user),
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Invalid current password")

    def test_other_user_cannot_change_password(self):
        other = make_user(username="mallory")
        response = self.client.put(
            self.url,
            json={
                "current_password": "Passw0rd1",
                "new_password": "N3wPassword",
                "confirm_password": "N3wPassword",
            },
            headers=auth_headers(other),
        )
        self.assertEqual(response.status_code, 403)
