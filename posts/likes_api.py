from django.http import HttpRequest
from ninja import Query, Router
from ninja.responses import codes_4xx

from myapp.schemas import ErrorOut
from posts.schemas import LikersResponse, LikeStatusResponse, LikeToggleResponse
from posts.services import likes
from users.auth import JWTAuth, OptionalJWTAuth, viewer_of

router = Router(tags=["Likes"])


@router.post(
    "/{post_id}/like",
    response={200: LikeToggleResponse, codes_4xx: ErrorOut},
    auth=JWTAuth(),
)
def toggle_like(request: HttpRequest, post_id: int):
    liked, like_count = likes.toggle_like(post_id, request.auth.id)
    return 200, {
        "message": "Post liked" if liked else "Post unliked",
        "data": {"liked": liked, "like_count": like_count},
    }


@router.get(
    "/{post_id}/like/status",
    response={200: LikeStatusResponse, codes_4xx: ErrorOut},
    auth=OptionalJWTAuth,
)
def like_status(request: HttpRequest, post_id: int):
    viewer = viewer_of(request)
    liked = likes.like_status(post_id, viewer.id if viewer else None)
    return 200, {"data": {"liked": liked}}


@router.get("/{post_id}/likes", response={200: LikersResponse, codes_4xx: ErrorOut})
def list_likes(
    request: HttpRequest,
    post_id: int,
    page: int = Query(1),
    limit: int = Query(likes.LIKES_DEFAULT_LIMIT),
):
    users, pagination = likes.list_likers(post_id, page=page, limit=limit)
    return 200, {"data": users, "pagination": pagination}
