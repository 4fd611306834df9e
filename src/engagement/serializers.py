"""Serializers for comment and like payloads."""

from rest_framework import serializers

from news.serializers import CommenterSerializer
from .models import COMMENT_MAX_LENGTH, Comment

COMMENTS_PAGE_SIZE = 20
MAX_COMMENTS_PAGE_SIZE = 100


class CommentSerializer(serializers.ModelSerializer):
    news_id = serializers.IntegerField(source="article_id", read_only=True)
    user = CommenterSerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "content", "news_id", "user", "created_at", "updated_at"]
        read_only_fields = fields


class CommentContentSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=1, max_length=COMMENT_MAX_LENGTH, allow_blank=False)


class CommentCreateSerializer(CommentContentSerializer):
    news_id = serializers.IntegerField(min_value=1)


class CommentListQuerySerializer(serializers.Serializer):
    news_id = serializers.IntegerField(min_value=1)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=MAX_COMMENTS_PAGE_SIZE, default=COMMENTS_PAGE_SIZE)


class NewsRefSerializer(serializers.Serializer):
    """``news_id`` carried in like toggle bodies and like status queries."""

    news_id = serializers.IntegerField(min_value=1)


__all__ = [
    "CommentContentSerializer",
    "CommentCreateSerializer",
    "CommentListQuerySerializer",
    "CommentSerializer",
    "NewsRefSerializer",
]
