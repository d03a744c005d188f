"""
Admin dashboard API.

Every route here is guarded by ``AdminAuth``: a valid token whose role claim
is ``admin``. Post edits and deletes made from here skip the ownership check
used by the public post endpoints.
"""

import logging
from typing import List, Optional

from django.db.models import Q
from django.http import HttpRequest
from ninja import Query, Router, Schema
from ninja.responses import codes_4xx

from myapp.exceptions import NotFoundError, ValidationError
from myapp.schemas import ErrorOut, Message, Pagination, UserOut
from myapp.utils import paginate
from posts.models import Comment, Like, Post
from posts.schemas import AdminPostDetailOut, PostOut, PostResponse, PostUpdateSchema
from posts.services import lifecycle
from users.auth import AdminAuth
from users.models import User
from users.permissions import policy
from users.schemas import AdminUserDetailOut, AdminUserUpdateSchema

logger = logging.getLogger(__name__)

router = Router(auth=AdminAuth(), tags=["Admin"])

ADMIN_DEFAULT_LIMIT = 20
RECENT_ITEMS_LIMIT = 10


# ============================================================================
# Schemas
# ============================================================================


class UserStatsOut(Schema):
    total: int
    admins: int
    banned: int


class PostStatsOut(Schema):
    total: int
    published: int
    draft: int


class StatsOut(Schema):
    users: UserStatsOut
    posts: PostStatsOut
    comments: int
    likes: int


class StatsResponse(Schema):
    success: bool = True
    data: StatsOut


class PaginatedUsersResponse(Schema):
    success: bool = True
    data: List[UserOut]
    pagination: Pagination


class AdminUserDetailResponse(Schema):
    success: bool = True
    data: AdminUserDetailOut


class AdminUserUpdateResponse(Schema):
    success: bool = True
    message: str
    data: UserOut


class AdminPaginatedPostsResponse(Schema):
    success: bool = True
    data: List[PostOut]
    pagination: Pagination


class AdminPostDetailResponse(Schema):
    success: bool = True
    data: AdminPostDetailOut


def _load_user(user_id: int) -> User:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError(
            f"User with ID {user_id} does not exist", error="User not found"
        )


# ============================================================================
# Dashboard
# ============================================================================


@router.get("/stats", response={200: StatsResponse, codes_4xx: ErrorOut})
def get_stats(request: HttpRequest):
    return 200, {
        "data": {
            "users": {
                "total": User.objects.count(),
                "admins": User.objects.filter(role=User.ADMIN).count(),
                "banned": User.objects.filter(is_banned=True).count(),
            },
            "posts": {
                "total": Post.objects.count(),
                "published": Post.objects.filter(status=Post.PUBLISHED).count(),
                "draft": Post.objects.filter(status=Post.DRAFT).count(),
            },
            "comments": Comment.objects.count(),
            "likes": Like.objects.count(),
        }
    }


# ============================================================================
# Users
# ============================================================================


@router.get("/users", response={200: PaginatedUsersResponse, codes_4xx: ErrorOut})
def list_users(
    request: HttpRequest,
    page: int = Query(1),
    limit: int = Query(ADMIN_DEFAULT_LIMIT),
    search: Optional[str] = Query(None),
):
    users = User.objects.order_by("-created_at", "-id")
    if search:
        users = users.filter(
            Q(username__icontains=search)
            | Q(email__icontains=search)
            | Q(full_name__icontains=search)
        )
    items, pagination = paginate(users, page, limit, default_limit=ADMIN_DEFAULT_LIMIT)
    return 200, {"data": items, "pagination": pagination}


@router.get("/users/{user_id}", response={200: AdminUserDetailResponse, codes_4xx: ErrorOut})
def get_user_detail(request: HttpRequest, user_id: int):
    user = _load_user(user_id)
    user.recent_posts = list(user.posts.order_by("-created_at")[:RECENT_ITEMS_LIMIT])
    return 200, {"data": user}


@router.put("/users/{user_id}", response={200: AdminUserUpdateResponse, codes_4xx: ErrorOut})
def update_user(request: HttpRequest, user_id: int, payload: AdminUserUpdateSchema):
    user = _load_user(user_id)
    changes = payload.dict(exclude_unset=True)

    if "role" in changes:
        role = changes["role"]
        policy.ensure_can_change_role(request.auth.id, user, role)
        if role not in (User.USER, User.ADMIN):
            raise ValidationError(
                'Role must be either "user" or "admin"', error="Invalid role"
            )
        user.role = role
    if changes.get("is_banned") is not None:
        user.is_banned = changes["is_banned"]
    user.save()

    logger.info(
        f"Admin {request.auth.id} updated user {user.id}: "
        f"role={user.role} banned={user.is_banned}"
    )
    return 200, {"message": "User updated successfully", "data": user}


@router.delete("/users/{user_id}", response={200: Message, codes_4xx: ErrorOut})
def delete_user(request: HttpRequest, user_id: int):
    user = _load_user(user_id)
    policy.ensure_can_delete_user(request.auth.id, user.id)
    lifecycle.delete_user(user)
    logger.info(f"Admin {request.auth.id} deleted user {user_id}")
    return 200, {"message": "User deleted successfully"}


# ============================================================================
# Posts
# ============================================================================


@router.get("/posts", response={200: AdminPaginatedPostsResponse, codes_4xx: ErrorOut})
def list_posts(
    request: HttpRequest,
    page: int = Query(1),
    limit: int = Query(ADMIN_DEFAULT_LIMIT),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    posts = lifecycle.annotated_posts()
    if status in Post.STATUSES:
        posts = posts.filter(status=status)
    if search:
        posts = posts.filter(Q(title__icontains=search) | Q(content__icontains=search))
    items, pagination = paginate(
        posts.order_by("-created_at", "-id"), page, limit, default_limit=ADMIN_DEFAULT_LIMIT
    )
    return 200, {"data": items, "pagination": pagination}


@router.get("/posts/{post_id}", response={200: AdminPostDetailResponse, codes_4xx: ErrorOut})
def get_post_detail(request: HttpRequest, post_id: int):
    try:
        post = lifecycle.annotated_posts().get(pk=post_id)
    except Post.DoesNotExist:
        raise NotFoundError(
            f"Post with ID {post_id} does not exist", error="Post not found"
        )

    post.recent_comments = list(
        post.comments.select_related("author").order_by("-created_at")[
            :RECENT_ITEMS_LIMIT
        ]
    )
    post.recent_likes = list(post.likes.order_by("-created_at")[:RECENT_ITEMS_LIMIT])
    return 200, {"data": post}


@router.put("/posts/{post_id}", response={200: PostResponse, codes_4xx: ErrorOut})
def update_post(request: HttpRequest, post_id: int, payload: PostUpdateSchema):
    post = lifecycle.admin_update_post(post_id, payload.dict(exclude_unset=True))
    logger.info(f"Admin {request.auth.id} updated post {post_id}")
    return 200, {"message": "Post updated successfully", "data": post}


@router.delete("/posts/{post_id}", response={200: Message, codes_4xx: ErrorOut})
def delete_post(request: HttpRequest, post_id: int):
    lifecycle.admin_delete_post(post_id)
    logger.info(f"Admin {request.auth.id} deleted post {post_id}")
    return 200, {"message": "Post deleted successfully"}
