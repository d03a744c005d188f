"""
Post lifecycle: creation, reads with derived counters, partial updates,
the draft/published state machine and transactional cascade deletes.
"""

import logging
from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Count, F, Q

from myapp.exceptions import NotFoundError, ValidationError
from myapp.utils import paginate
from posts.models import Comment, Like, Post
from users.models import User
from users.permissions import policy

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "latest": ["-created_at", "-id"],
    "oldest": ["created_at", "id"],
    "popular": ["-views_count", "-created_at"],
}

STATUS_FILTERS = ("published", "draft", "all")


def annotated_posts():
    return Post.objects.select_related("author").annotate(
        like_count=Count("likes", distinct=True),
        comment_count=Count("comments", distinct=True),
    )


def _load(post_id: int) -> Post:
    try:
        return Post.objects.get(pk=post_id)
    except Post.DoesNotExist:
        raise NotFoundError(f"Post with ID {post_id} does not exist", error="Post not found")


def _annotated(post_id: int) -> Post:
    return annotated_posts().get(pk=post_id)


def _validate_title(title) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title and content are required")
    if len(title) > Post.TITLE_MAX_LENGTH:
        raise ValidationError("Title must be less than 255 characters")


def _validate_content(content) -> None:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Title and content are required")


def _validate_excerpt(excerpt) -> None:
    if excerpt and len(excerpt) > Post.EXCERPT_MAX_LENGTH:
        raise ValidationError("Excerpt must be less than 500 characters")


def _validate_featured_image(featured_image) -> None:
    if featured_image and len(featured_image) > Post.FEATURED_IMAGE_MAX_LENGTH:
        raise ValidationError("Featured image URL must be less than 500 characters")


def _validate_status(status) -> None:
    if status not in Post.STATUSES:
        raise ValidationError(
            'Status must be either "draft" or "published"', error="Invalid status"
        )


def _validate_changes(changes: Dict[str, Any]) -> None:
    if "title" in changes:
        _validate_title(changes["title"])
    if "content" in changes:
        _validate_content(changes["content"])
    if "excerpt" in changes:
        _validate_excerpt(changes["excerpt"])
    if "featured_image" in changes:
        _validate_featured_image(changes["featured_image"])
    if "status" in changes:
        _validate_status(changes["status"])


def _apply_changes(post: Post, changes: Dict[str, Any]) -> Post:
    for field in ("title", "content", "featured_image"):
        if field in changes:
            setattr(post, field, changes[field])
    if "excerpt" in changes:
        post.excerpt = changes["excerpt"] or Post.derive_excerpt(post.content)
    if "status" in changes:
        post.set_status(changes["status"])
    post.save()
    return post


def create_post(
    author_id: int,
    title,
    content,
    excerpt: Optional[str] = None,
    featured_image: Optional[str] = None,
    status: Optional[str] = None,
) -> Post:
    _validate_title(title)
    _validate_content(content)
    _validate_excerpt(excerpt)
    _validate_featured_image(featured_image)
    status = status or Post.DRAFT
    _validate_status(status)

    if not User.objects.filter(pk=author_id).exists():
        raise NotFoundError("The user associated with this token no longer exists")

    post = Post(
        author_id=author_id,
        title=title,
        content=content,
        excerpt=excerpt or Post.derive_excerpt(content),
        featured_image=featured_image or None,
    )
    post.set_status(status)
    post.save()

    logger.info(f"User {author_id} created post {post.id} ({post.status})")
    return _annotated(post.id)


def get_post(post_id: int, viewer_id: Optional[int] = None) -> Post:
    """
    Load a post for its detail page. Every call counts as a view, whoever
    the viewer is.
    """
    updated = Post.objects.filter(pk=post_id).update(views_count=F("views_count") + 1)
    if not updated:
        raise NotFoundError(f"Post with ID {post_id} does not exist", error="Post not found")

    post = _annotated(post_id)
    post.user_liked = (
        viewer_id is not None
        and Like.objects.filter(post_id=post_id, user_id=viewer_id).exists()
    )
    return post


def _visible(queryset, status: str, viewer_id: Optional[int]):
    published = Q(status=Post.PUBLISHED)
    if status == "published":
        return queryset.filter(published)
    if viewer_id is None:
        return queryset.filter(published) if status == "all" else queryset.none()
    own = Q(author_id=viewer_id)
    if status == "draft":
        return queryset.filter(Q(status=Post.DRAFT) & own)
    return queryset.filter(published | own)


def list_posts(
    page: int = 1,
    limit: int = 10,
    status: str = "published",
    sort: str = "latest",
    search: Optional[str] = None,
    viewer_id: Optional[int] = None,
):
    if status not in STATUS_FILTERS:
        raise ValidationError("Status must be one of published, draft or all")

    posts = _visible(annotated_posts(), status, viewer_id)
    if search:
        posts = posts.filter(Q(title__icontains=search) | Q(content__icontains=search))
    posts = posts.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS["latest"]))

    return paginate(posts, page, limit)


def list_user_posts(
    user_id: int,
    page: int = 1,
    limit: int = 10,
    status: str = "published",
    viewer_id: Optional[int] = None,
):
    """
    Posts of one author. Other viewers only ever see published posts; the
    author may ask for drafts or everything.
    """
    if not User.objects.filter(pk=user_id).exists():
        raise NotFoundError(f"User with ID {user_id} does not exist", error="User not found")

    if viewer_id != user_id:
        status = "published"
    if status not in STATUS_FILTERS:
        raise ValidationError("Status must be one of published, draft or all")

    posts = annotated_posts().filter(author_id=user_id)
    if status != "all":
        posts = posts.filter(status=status)

    return paginate(posts.order_by("-created_at", "-id"), page, limit)


def update_post(post_id: int, claims, changes: Dict[str, Any]) -> Post:
    post = _load(post_id)
    policy.ensure_can_mutate(claims, post.author_id, "You can only update your own posts")
    _validate_changes(changes)
    _apply_changes(post, changes)
    logger.info(f"User {claims.id} updated post {post.id}")
    return _annotated(post.id)


def admin_update_post(post_id: int, changes: Dict[str, Any]) -> Post:
    post = _load(post_id)
    _validate_changes(changes)
    _apply_changes(post, changes)
    return _annotated(post.id)


def _cascade_delete_post(post: Post) -> None:
    with transaction.atomic():
        Comment.objects.filter(post=post).delete()
        Like.objects.filter(post=post).delete()
        post.delete()


def delete_post(post_id: int, claims) -> None:
    post = _load(post_id)
    policy.ensure_can_mutate(claims, post.author_id, "You can only delete your own posts")
    _cascade_delete_post(post)
    logger.info(f"User {claims.id} deleted post {post_id}")


def admin_delete_post(post_id: int) -> None:
    post = _load(post_id)
    _cascade_delete_post(post)


def delete_user(user: User) -> None:
    """
    Remove an account together with its posts, comments and likes, and
    everything other users attached to those posts.
    """
    user_id = user.id
    with transaction.atomic():
        own_posts = Post.objects.filter(author=user)
        Comment.objects.filter(post__in=own_posts).delete()
        Like.objects.filter(post__in=own_posts).delete()
        own_posts.delete()
        Like.objects.filter(user=user).delete()
        Comment.objects.filter(author=user).delete()
        user.delete()
    logger.info(f"Deleted user {user_id} and all related content")
