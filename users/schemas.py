"""
This module defines the input and output schemas for user authentication actions
and other user-related actions.
"""

from datetime import datetime
from typing import List, Optional

from ninja import Schema

from myapp.schemas import UserOut

"""
Users's Authentication Schemas
"""


class UserCreateSchema(Schema):
    """
    Input schema for registering a new account. Requires username, email and
    password; the full name is optional.
    """

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None


class LogInSchemaIn(Schema):
    """
    Input schema for user log in. Either the email or the username identifies
    the account.
    """

    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class AuthData(Schema):
    token: str
    user: UserOut


class AuthResponse(Schema):
    """
    Output schema for register, login and /me: a fresh token plus the account.
    """

    success: bool = True
    message: str
    data: AuthData


"""
User's Profile Schemas
"""


class RecentPostSchema(Schema):
    id: int
    title: str
    excerpt: str
    views_count: int
    created_at: datetime


class UserProfileOut(Schema):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    post_count: int
    recent_posts: List[RecentPostSchema]


class UserProfileResponse(Schema):
    success: bool = True
    data: UserProfileOut


class UserUpdateSchema(Schema):
    """Patch payload: only the keys present in the request are applied."""

    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class UserUpdateResponse(Schema):
    success: bool = True
    message: str
    data: UserOut


class ChangePasswordSchema(Schema):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None


"""
Admin user management schemas
"""


class AdminUserUpdateSchema(Schema):
    role: Optional[str] = None
    is_banned: Optional[bool] = None


class AdminRecentPostSchema(Schema):
    id: int
    title: str
    status: str
    created_at: datetime


class AdminUserDetailOut(UserOut):
    recent_posts: List[AdminRecentPostSchema]
