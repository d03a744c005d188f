import logging
from typing import Optional, Tuple

from django.db import IntegrityError, transaction

from myapp.exceptions import NotFoundError
from myapp.utils import paginate
from posts.models import Like, Post

logger = logging.getLogger(__name__)

LIKES_DEFAULT_LIMIT = 20


def _ensure_post(post_id: int) -> None:
    if not Post.objects.filter(pk=post_id).exists():
        raise NotFoundError("Post not found")


def like_count(post_id: int) -> int:
    return Like.objects.filter(post_id=post_id).count()


def toggle_like(post_id: int, user_id: int) -> Tuple[bool, int]:
    """
    Flip the caller's like on a post and return ``(liked, like_count)``.
    """
    _ensure_post(post_id)

    with transaction.atomic():
        removed, _ = Like.objects.filter(post_id=post_id, user_id=user_id).delete()
        if removed:
            liked = False
        else:
            try:
                with transaction.atomic():
                    Like.objects.create(post_id=post_id, user_id=user_id)
            except IntegrityError:
                # A concurrent request inserted the same (user, post) row.
                logger.info(f"Like by user {user_id} on post {post_id} already recorded")
            liked = True

    return liked, like_count(post_id)


def like_status(post_id: int, user_id: Optional[int] = None) -> bool:
    if user_id is None:
        return False
    _ensure_post(post_id)
    return Like.objects.filter(post_id=post_id, user_id=user_id).exists()


def list_likers(post_id: int, page: int = 1, limit: int = LIKES_DEFAULT_LIMIT):
    _ensure_post(post_id)
    likes = (
        Like.objects.filter(post_id=post_id)
        .select_related("user")
        .order_by("-created_at", "-id")
    )
    items, pagination = paginate(likes, page, limit, default_limit=LIKES_DEFAULT_LIMIT)
    return [like.user for like in items], pagination
