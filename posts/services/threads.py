"""
Comment threads: top-level comments with a single level of replies.
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Prefetch

from myapp.exceptions import NotFoundError, ValidationError
from myapp.utils import paginate
from posts.models import Comment, Post
from users.permissions import policy

logger = logging.getLogger(__name__)

COMMENTS_DEFAULT_LIMIT = 20


def _clean_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Comment content is required")
    content = content.strip()
    if len(content) > Comment.CONTENT_MAX_LENGTH:
        raise ValidationError("Comment must be less than 1000 characters")
    return content


def _ensure_post(post_id: int) -> None:
    if not Post.objects.filter(pk=post_id).exists():
        raise NotFoundError("Post not found")


def _load(comment_id: int, post_id: Optional[int] = None) -> Comment:
    comments = Comment.objects.all()
    if post_id is not None:
        comments = comments.filter(post_id=post_id)
    try:
        return comments.get(pk=comment_id)
    except Comment.DoesNotExist:
        raise NotFoundError("Comment not found")


def _with_author(comment_id: int) -> Comment:
    return Comment.objects.select_related("author").get(pk=comment_id)


def create_comment(
    post_id: int, author_id: int, content, parent_id: Optional[int] = None
) -> Comment:
    content = _clean_content(content)
    _ensure_post(post_id)

    if parent_id:
        try:
            parent = Comment.objects.get(pk=parent_id)
        except Comment.DoesNotExist:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError(
                "Parent comment does not belong to this post", error="Invalid request"
            )
        if parent.is_reply:
            raise ValidationError(
                "Replies can only be made to top-level comments", error="Invalid request"
            )

    comment = Comment.objects.create(
        post_id=post_id,
        author_id=author_id,
        content=content,
        parent_id=parent_id or None,
    )
    logger.info(f"User {author_id} commented on post {post_id} (comment {comment.id})")
    return _with_author(comment.id)


def list_comments(post_id: int, page: int = 1, limit: int = COMMENTS_DEFAULT_LIMIT):
    """
    Top-level comments newest first, each carrying all of its replies oldest
    first.
    """
    _ensure_post(post_id)

    replies = Comment.objects.select_related("author").order_by("created_at", "id")
    comments = (
        Comment.objects.filter(post_id=post_id, parent__isnull=True)
        .select_related("author")
        .prefetch_related(Prefetch("replies", queryset=replies))
        .order_by("-created_at", "-id")
    )
    return paginate(comments, page, limit, default_limit=COMMENTS_DEFAULT_LIMIT)


def update_comment(comment_id: int, claims, content, post_id: Optional[int] = None) -> Comment:
    comment = _load(comment_id, post_id)
    policy.ensure_can_mutate(
        claims, comment.author_id, "You can only edit your own comments"
    )
    comment.content = _clean_content(content)
    comment.save(update_fields=["content", "updated_at"])
    return _with_author(comment.id)


def delete_comment(comment_id: int, claims, post_id: Optional[int] = None) -> None:
    comment = _load(comment_id, post_id)
    policy.ensure_can_mutate(
        claims, comment.author_id, "You can only delete your own comments"
    )
    with transaction.atomic():
        deleted_replies, _ = Comment.objects.filter(parent=comment).delete()
        comment.delete()
    logger.info(
        f"User {claims.id} deleted comment {comment_id} and {deleted_replies} replies"
    )
