from django.db import models
from django.utils import timezone

from users.models import User


class Post(models.Model):
    DRAFT = "draft"
    PUBLISHED = "published"
    STATUS_CHOICES = [(DRAFT, "Draft"), (PUBLISHED, "Published")]
    STATUSES = (DRAFT, PUBLISHED)

    TITLE_MAX_LENGTH = 255
    EXCERPT_MAX_LENGTH = 500
    FEATURED_IMAGE_MAX_LENGTH = 500

    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name="posts")
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    content = models.TextField()
    excerpt = models.CharField(max_length=EXCERPT_MAX_LENGTH, blank=True, default="")
    featured_image = models.URLField(max_length=FEATURED_IMAGE_MAX_LENGTH, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=DRAFT)
    views_count = models.PositiveIntegerField(default=0)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="post_status_created_idx"),
        ]

    def __str__(self):
        return self.title

    @classmethod
    def derive_excerpt(cls, content: str) -> str:
        return content[: cls.EXCERPT_MAX_LENGTH]

    def set_status(self, status: str) -> None:
        """
        Move the post to ``status``. The first transition to published stamps
        ``published_at``; later transitions never clear it.
        """
        self.status = status
        if status == self.PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()


class Comment(models.Model):
    CONTENT_MAX_LENGTH = 1000

    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name="comments")
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    parent = models.ForeignKey(
        "self", on_delete=models.CASCADE, null=True, blank=True, related_name="replies"
    )
    content = models.TextField(max_length=CONTENT_MAX_LENGTH)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Comment by {self.author.username} on {self.post.title}"

    class Meta:
        ordering = ["created_at"]

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None


class Like(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="likes")
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="unique_user_post_like")
        ]

    def __str__(self):
        return f"{self.user.username} likes {self.post.title}"
