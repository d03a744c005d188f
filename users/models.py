"""
Holds the User model and UserManager class.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """
    Custom user manager where username and email are both unique identifiers
    """

    def create_user(self, username, email, password, **extra_fields):
        """
        Create and save a User with the given username, email and password.
        """
        if not email:
            raise ValueError(_("The Email must be set"))
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)
        user.save()
        return user

    def create_superuser(self, username, email, password, **extra_fields):
        """
        Create and save an admin account that can also use the Django admin site.
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)
        extra_fields.setdefault("role", User.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError(_("Superuser must have is_staff=True."))
        if extra_fields.get("is_superuser") is not True:
            raise ValueError(_("Superuser must have is_superuser=True."))
        return self.create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Blog account. ``role`` decides access to the admin dashboard, ``is_banned``
    is toggled by admins.
    """

    USER = "user"
    ADMIN = "admin"
    ROLE_CHOICES = [(USER, "User"), (ADMIN, "Admin")]

    EMAIL_MAX_LENGTH = 255
    FULL_NAME_MAX_LENGTH = 100
    AVATAR_URL_MAX_LENGTH = 500

    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(max_length=EMAIL_MAX_LENGTH, unique=True)
    full_name = models.CharField(max_length=FULL_NAME_MAX_LENGTH, null=True, blank=True)
    bio = models.TextField(null=True, blank=True)
    avatar_url = models.URLField(max_length=AVATAR_URL_MAX_LENGTH, null=True, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=USER)
    is_banned = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    class Meta:
        db_table = "user"
        ordering = ["-created_at"]

    def __str__(self):
        return self.username

    @property
    def is_admin(self) -> bool:
        return self.role == self.ADMIN
