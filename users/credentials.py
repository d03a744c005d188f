"""
Password hashing and account field format checks.

The validators return booleans; callers turn ``False`` into a 400 response.
"""

import re

from django.contrib.auth.hashers import check_password, make_password

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,50}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_MIN_LENGTH = 8
LOWERCASE = re.compile(r"[a-z]")
UPPERCASE = re.compile(r"[A-Z]")
DIGIT = re.compile(r"[0-9]")

USERNAME_RULES = "Username must be 3-50 characters, alphanumeric and underscore only"
EMAIL_RULES = "Please provide a valid email address"
PASSWORD_RULES = (
    "Password must be at least 8 characters with uppercase, lowercase, and number"
)


def hash_password(password: str) -> str:
    return make_password(password)


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    return check_password(password, hashed)


def validate_username(username) -> bool:
    return isinstance(username, str) and bool(USERNAME_PATTERN.fullmatch(username))


def validate_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_PATTERN.fullmatch(email))


def validate_password(password) -> bool:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return (
        bool(LOWERCASE.search(password))
        and bool(UPPERCASE.search(password))
        and bool(DIGIT.search(password))
    )
