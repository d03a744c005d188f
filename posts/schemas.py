from datetime import datetime
from typing import List, Optional

from ninja import Field, ModelSchema, Schema

from myapp.schemas import Pagination, UserSummary
from posts.models import Comment, Post

"""
Post schemas
"""


class PostCreateSchema(Schema):
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: Optional[str] = None


class PostUpdateSchema(Schema):
    """Patch payload: only the keys present in the request are applied."""

    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: Optional[str] = None


class PostOut(ModelSchema):
    author: UserSummary
    like_count: int = Field(0)
    comment_count: int = Field(0)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "content",
            "excerpt",
            "featured_image",
            "status",
            "views_count",
            "published_at",
            "created_at",
            "updated_at",
        ]


class PostDetailOut(PostOut):
    user_liked: bool = Field(False)


class PostResponse(Schema):
    success: bool = True
    message: Optional[str] = None
    data: PostOut


class PostDetailResponse(Schema):
    success: bool = True
    data: PostDetailOut


class PaginatedPostsResponse(Schema):
    success: bool = True
    data: List[PostOut]
    pagination: Pagination


"""
Comment schemas
"""


class CommentCreateSchema(Schema):
    content: Optional[str] = None
    parent_id: Optional[int] = Field(
        None, description="ID of the parent comment if it's a reply"
    )


class CommentUpdateSchema(Schema):
    content: Optional[str] = None


class ReplyOut(ModelSchema):
    post_id: int
    parent_id: Optional[int] = None
    author: UserSummary

    class Meta:
        model = Comment
        fields = ["id", "content", "created_at", "updated_at"]


class CommentOut(ReplyOut):
    replies: List[ReplyOut] = Field(default_factory=list)


class CommentResponse(Schema):
    success: bool = True
    message: Optional[str] = None
    data: CommentOut


class PaginatedCommentsResponse(Schema):
    success: bool = True
    data: List[CommentOut]
    pagination: Pagination


"""
Like schemas
"""


class LikeToggleOut(Schema):
    liked: bool
    like_count: int


class LikeToggleResponse(Schema):
    success: bool = True
    message: str
    data: LikeToggleOut


class LikeStatusOut(Schema):
    liked: bool


class LikeStatusResponse(Schema):
    success: bool = True
    data: LikeStatusOut


class LikersResponse(Schema):
    success: bool = True
    data: List[UserSummary]
    pagination: Pagination


"""
Admin schemas
"""


class AdminCommentOut(Schema):
    id: int
    content: str
    created_at: datetime
    author: UserSummary


class AdminLikeOut(Schema):
    user_id: int
    created_at: datetime


class AdminPostDetailOut(PostOut):
    recent_comments: List[AdminCommentOut] = Field(default_factory=list)
    recent_likes: List[AdminLikeOut] = Field(default_factory=list)
