"""Comments and likes attached to articles."""

from django.conf import settings
from django.db import models

COMMENT_MAX_LENGTH = 1000


class Comment(models.Model):
    """Reader comment; article and author are fixed at creation."""

    content = models.TextField(max_length=COMMENT_MAX_LENGTH)
    article = models.ForeignKey("news.Article", on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Comment(article={self.article_id}, user={self.user_id})"


class Like(models.Model):
    """At most one per (user, article); the constraint arbitrates toggle races."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="likes")
    article = models.ForeignKey("news.Article", on_delete=models.CASCADE, related_name="likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "article"], name="engagement_like_user_article_uniq"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Like(user={self.user_id}, article={self.article_id})"


__all__ = ["COMMENT_MAX_LENGTH", "Comment", "Like"]
