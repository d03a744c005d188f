import logging

from django.http import HttpRequest
from ninja import Router
from ninja.responses import codes_4xx

from myapp.exceptions import AuthenticationError, NotFoundError, ValidationError
from myapp.schemas import ErrorOut, Message
from posts.models import Post
from users.auth import JWTAuth
from users.credentials import (
    PASSWORD_RULES,
    hash_password,
    validate_password,
    verify_password,
)
from users.models import User
from users.permissions import policy
from users.schemas import (
    ChangePasswordSchema,
    UserProfileResponse,
    UserUpdateSchema,
    UserUpdateResponse,
)

router = Router(tags=["Users"])

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "bio", "avatar_url")
PROFILE_FIELD_LIMITS = {
    "full_name": User.FULL_NAME_MAX_LENGTH,
    "avatar_url": User.AVATAR_URL_MAX_LENGTH,
}
RECENT_POSTS_LIMIT = 5


def _load_user(user_id: int) -> User:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError(
            f"User with ID {user_id} does not exist", error="User not found"
        )


"""
User's Profile API
"""


@router.get("/{user_id}", response={200: UserProfileResponse, codes_4xx: ErrorOut})
def get_user(request: HttpRequest, user_id: int):
    user = _load_user(user_id)
    published = Post.objects.filter(author=user, status=Post.PUBLISHED)

    return 200, {
        "data": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name,
            "bio": user.bio,
            "avatar_url": user.avatar_url,
            "created_at": user.created_at,
            "post_count": published.count(),
            "recent_posts": list(
                published.order_by("-created_at")[:RECENT_POSTS_LIMIT]
            ),
        }
    }


@router.put(
    "/{user_id}",
    response={200: UserUpdateResponse, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def update_profile(request: HttpRequest, user_id: int, payload: UserUpdateSchema):
    user = _load_user(user_id)
    policy.ensure_can_mutate(
        request.auth, user.id, "You can only update your own profile"
    )

    changes = payload.dict(exclude_unset=True)
    for field, max_length in PROFILE_FIELD_LIMITS.items():
        if changes.get(field) and len(changes[field]) > max_length:
            raise ValidationError(f"{field} must be less than {max_length} characters")
    for field in PROFILE_FIELDS:
        if field in changes:
            setattr(user, field, changes[field])
    user.save()

    return 200, {"message": "Profile updated successfully", "data": user}


@router.put(
    "/{user_id}/password",
    response={200: Message, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def change_password(request: HttpRequest, user_id: int, payload: ChangePasswordSchema):
    user = _load_user(user_id)
    policy.ensure_can_mutate(
        request.auth, user.id, "You can only change your own password"
    )

    if (
        not payload.current_password
        or not payload.new_password
        or not payload.confirm_password
    ):
        raise ValidationError("Please provide current password and new password")
    if payload.new_password != payload.confirm_password:
        raise ValidationError("New passwords do not match")
    if not validate_password(payload.new_password):
        raise ValidationError(PASSWORD_RULES, error="Weak password")

    if not verify_password(payload.current_password, user.password):
        raise AuthenticationError(
            "The current password you provided is incorrect",
            error="Invalid current password",
        )

    user.password = hash_password(payload.new_password)
    user.save(update_fields=["password", "updated_at"])
    logger.info(f"User {user.id} changed their password")

    return 200, {"message": "Password changed successfully"}
