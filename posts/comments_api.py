from django.http import HttpRequest
from ninja import Query, Router
from ninja.responses import codes_4xx

from myapp.schemas import ErrorOut, Message
from posts.schemas import (
    CommentCreateSchema,
    CommentResponse,
    CommentUpdateSchema,
    PaginatedCommentsResponse,
)
from posts.services import threads
from users.auth import JWTAuth

router = Router(tags=["Comments"])

"""
Comments related endpoints
"""


@router.get(
    "/{post_id}/comments",
    response={200: PaginatedCommentsResponse, codes_4xx: ErrorOut},
)
def list_comments(
    request: HttpRequest,
    post_id: int,
    page: int = Query(1),
    limit: int = Query(threads.COMMENTS_DEFAULT_LIMIT),
):
    comments, pagination = threads.list_comments(post_id, page=page, limit=limit)
    return 200, {"data": comments, "pagination": pagination}


@router.post(
    "/{post_id}/comments",
    response={201: CommentResponse, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def create_comment(request: HttpRequest, post_id: int, payload: CommentCreateSchema):
    comment = threads.create_comment(
        post_id, request.auth.id, payload.content, payload.parent_id
    )
    return 201, {"message": "Comment created successfully", "data": comment}


@router.put(
    "/{post_id}/comments/{comment_id}",
    response={200: CommentResponse, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def update_comment(
    request: HttpRequest, post_id: int, comment_id: int, payload: CommentUpdateSchema
):
    comment = threads.update_comment(
        comment_id, request.auth, payload.content, post_id=post_id
    )
    return 200, {"message": "Comment updated successfully", "data": comment}


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response={200: Message, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def delete_comment(request: HttpRequest, post_id: int, comment_id: int):
    threads.delete_comment(comment_id, request.auth, post_id=post_id)
    return 200, {"message": "Comment deleted successfully"}
