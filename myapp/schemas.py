"""
Common schema for all the models
"""

from ninja import ModelSchema, Schema

from users.models import User


class Message(Schema):
    success: bool = True
    message: str


class ErrorOut(Schema):
    error: str
    message: str


class Pagination(Schema):
    total: int
    pages: int
    current_page: int
    limit: int


class UserSummary(ModelSchema):
    """Author block embedded in posts, comments and like listings."""

    class Meta:
        model = User
        fields = ["id", "username", "full_name", "avatar_url"]


class UserOut(ModelSchema):
    """Account as returned by the auth endpoints and the admin dashboard."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "full_name",
            "avatar_url",
            "bio",
            "role",
            "is_banned",
            "created_at",
        ]
