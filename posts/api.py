# api.py
from typing import Literal, Optional

from django.http import HttpRequest
from ninja import Query, Router
from ninja.responses import codes_4xx

from myapp.schemas import ErrorOut, Message
from posts.schemas import (
    PaginatedPostsResponse,
    PostCreateSchema,
    PostDetailResponse,
    PostResponse,
    PostUpdateSchema,
)
from posts.services import lifecycle
from users.auth import JWTAuth, OptionalJWTAuth, viewer_of

router = Router(tags=["Posts"])

"""
Post related endpoints
"""


@router.post("/", response={201: PostResponse, codes_4xx: ErrorOut}, auth=JWTAuth())
def create_post(request: HttpRequest, payload: PostCreateSchema):
    post = lifecycle.create_post(request.auth.id, **payload.dict())
    return 201, {"message": "Post created successfully", "data": post}


@router.get(
    "/", response={200: PaginatedPostsResponse, codes_4xx: ErrorOut}, auth=OptionalJWTAuth
)
def list_posts(
    request: HttpRequest,
    page: int = Query(1),
    limit: int = Query(10),
    status: Literal["published", "draft", "all"] = Query("published"),
    sort: Literal["latest", "oldest", "popular"] = Query("latest"),
    search: Optional[str] = Query(None),
):
    viewer = viewer_of(request)
    posts, pagination = lifecycle.list_posts(
        page=page,
        limit=limit,
        status=status,
        sort=sort,
        search=search,
        viewer_id=viewer.id if viewer else None,
    )
    return 200, {"data": posts, "pagination": pagination}


@router.get(
    "/user/{user_id}",
    response={200: PaginatedPostsResponse, codes_4xx: ErrorOut},
    auth=OptionalJWTAuth,
)
def list_user_posts(
    request: HttpRequest,
    user_id: int,
    page: int = Query(1),
    limit: int = Query(10),
    status: Literal["published", "draft", "all"] = Query("published"),
):
    viewer = viewer_of(request)
    posts, pagination = lifecycle.list_user_posts(
        user_id,
        page=page,
        limit=limit,
        status=status,
        viewer_id=viewer.id if viewer else None,
    )
    return 200, {"data": posts, "pagination": pagination}


@router.get(
    "/{post_id}", response={200: PostDetailResponse, codes_4xx: ErrorOut}, auth=OptionalJWTAuth
)
def get_post(request: HttpRequest, post_id: int):
    viewer = viewer_of(request)
    post = lifecycle.get_post(post_id, viewer.id if viewer else None)
    return 200, {"data": post}


@router.put("/{post_id}", response={200: PostResponse, codes_4xx: ErrorOut}, auth=JWTAuth())
def update_post(request: HttpRequest, post_id: int, payload: PostUpdateSchema):
    post = lifecycle.update_post(post_id, request.auth, payload.dict(exclude_unset=True))
    return 200, {"message": "Post updated successfully", "data": post}


@router.delete("/{post_id}", response={200: Message, codes_4xx: ErrorOut}, auth=JWTAuth())
def delete_post(request: HttpRequest, post_id: int):
    lifecycle.delete_post(post_id, request.auth)
    return 200, {"message": "Post deleted successfully"}
