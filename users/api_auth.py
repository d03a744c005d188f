"""
This file contains the API endpoints related to account registration and login.
"""

import logging

from django.db import IntegrityError
from django.http import HttpRequest
from ninja import Router
from ninja.responses import codes_4xx

from myapp.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from myapp.schemas import ErrorOut
from users.auth import JWTAuth
from users.credentials import (
    EMAIL_RULES,
    PASSWORD_RULES,
    USERNAME_RULES,
    validate_email,
    validate_password,
    validate_username,
    verify_password,
)
from users.models import User
from users.schemas import AuthResponse, LogInSchemaIn, UserCreateSchema
from users.tokens import issue_token

router = Router(tags=["Users Auth"])

# Module-level logger
logger = logging.getLogger(__name__)


def _auth_payload(user: User, message: str):
    return {"message": message, "data": {"token": issue_token(user), "user": user}}


@router.post("/register", response={201: AuthResponse, codes_4xx: ErrorOut})
def register(request: HttpRequest, payload: UserCreateSchema):
    if not payload.username or not payload.email or not payload.password:
        raise ValidationError(
            "username, email, and password are required",
            error="Missing required fields",
        )
    if not validate_username(payload.username):
        raise ValidationError(USERNAME_RULES, error="Invalid username")
    if not validate_email(payload.email) or len(payload.email) > User.EMAIL_MAX_LENGTH:
        raise ValidationError(EMAIL_RULES, error="Invalid email")
    if not validate_password(payload.password):
        raise ValidationError(PASSWORD_RULES, error="Weak password")
    if payload.full_name and len(payload.full_name) > User.FULL_NAME_MAX_LENGTH:
        raise ValidationError("Full name must be less than 100 characters")

    if User.objects.filter(username=payload.username).exists():
        raise ConflictError(
            "This username is already taken", error="Username already exists"
        )
    if User.objects.filter(email__iexact=payload.email).exists():
        raise ConflictError(
            "This email is already registered", error="Email already exists"
        )

    try:
        user = User.objects.create_user(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name or None,
        )
    except IntegrityError:
        raise ConflictError("Username or email is already registered")

    logger.info(f"Registered user {user.id} ({user.username})")
    return 201, _auth_payload(user, "Registration successful")


@router.post("/login", response={200: AuthResponse, codes_4xx: ErrorOut})
def login_user(request: HttpRequest, payload: LogInSchemaIn):
    if not payload.password or not (payload.email or payload.username):
        raise ValidationError(
            "Please provide email/username and password", error="Missing credentials"
        )

    if payload.email:
        user = User.objects.filter(email__iexact=payload.email).first()
    else:
        user = User.objects.filter(username=payload.username).first()

    if not user:
        raise NotFoundError(
            "Invalid email/username or password", error="User not found"
        )

    if not verify_password(payload.password, user.password):
        logger.warning(f"Failed login for user {user.id}")
        raise AuthenticationError(
            "Invalid email/username or password", error="Invalid credentials"
        )

    if user.is_banned:
        raise AuthorizationError(
            "This account has been banned", error="Account banned"
        )

    logger.info(f"User {user.id} logged in")
    return 200, _auth_payload(user, "Login successful")


@router.get("/me", response={200: AuthResponse, codes_4xx: ErrorOut}, auth=JWTAuth())
def get_me(request: HttpRequest):
    """
    Reload the caller from the database and re-issue the token so that role
    changes made since the last login are picked up. Banned accounts get no
    new token.
    """
    user = User.objects.filter(pk=request.auth.id).first()
    if not user:
        raise NotFoundError(
            "The user associated with this token no longer exists",
            error="User not found",
        )
    if user.is_banned:
        raise AuthorizationError(
            "This account has been banned", error="Account banned"
        )
    return 200, _auth_payload(user, "User data retrieved")
