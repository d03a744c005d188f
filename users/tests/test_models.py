from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import TestCase

User = get_user_model()


class UserManagerTest(TestCase):
    def setUp(self):
        self.user_data = {
            "username": "testuser",
            "email": "testuser@example.com",
            "password": "Password123",
        }
        self.superuser_data = {
            "username": "admin",
            "email": "admin@example.com",
            "password": "AdminPass123",
        }

    def test_create_user(self):
        user = User.objects.create_user(**self.user_data)
        self.assertEqual(user.username, self.user_data["username"])
        self.assertEqual(user.email, self.user_data["email"])
        self.assertTrue(user.check_password(self.user_data["password"]))
        self.assertNotEqual(user.password, self.user_data["password"])
        self.assertEqual(user.role, User.USER)
        self.assertFalse(user.is_banned)
        self.assertFalse(user.is_admin)

    def test_create_user_without_email(self):
        with self.assertRaises(ValueError) as context:
            User.objects.create_user(username="noemail", email="", password="Password123")
        self.assertEqual(str(context.exception), "The Email must be set")

    def test_create_superuser(self):
        admin = User.objects.create_superuser(**self.superuser_data)
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.role, User.ADMIN)
        self.assertTrue(admin.is_admin)

    def test_username_is_unique(self):
        User.objects.create_user(**self.user_data)
        with self.assertRaises(IntegrityError):
            User.objects.create_user(
                username="testuser", email="other@example.com", password="Password123"
            )

    def test_str_is_username(self):
        user = User.objects.create_user(**self.user_data)
        self.assertEqual(str(user), "testuser")
