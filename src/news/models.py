"""Article model with moderation status and a denormalized like counter."""

from django.conf import settings
from django.db import models

from .state_machine import ArticleStatus


class Article(models.Model):
    """A news article owned by its author.

    ``like_count`` mirrors the number of ``engagement.Like`` rows for the
    article; it is only changed together with a Like insert or delete.
    """

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=300, unique=True)
    content = models.TextField()
    category = models.CharField(max_length=100, blank=True, null=True)
    thumbnail = models.URLField(max_length=1000, blank=True, null=True)
    status = models.CharField(
        max_length=16, choices=ArticleStatus.choices, default=ArticleStatus.PENDING
    )
    like_count = models.PositiveIntegerField(default=0)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="articles"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="news_status_created_idx"),
            models.Index(fields=["category"], name="news_category_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["Article"]
