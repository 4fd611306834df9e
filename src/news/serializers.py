"""Serializers for article listing, detail, writes, and moderation."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Article
from .queries import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ListingParams
from .state_machine import MODERATION_TARGETS, ArticleStatus

User = get_user_model()


class AuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class CommenterSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name"]
        read_only_fields = fields


class ArticleCommentSerializer(serializers.Serializer):
    """Comment as embedded in an article detail payload."""

    id = serializers.IntegerField(read_only=True)
    content = serializers.CharField(read_only=True)
    user = CommenterSerializer(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ArticleSerializer(serializers.ModelSerializer):
    """Article as returned by writes and dashboard listings."""

    author = AuthorSerializer(read_only=True)

    class Meta:
        model = Article
        fields = [
            "id",
            "title",
            "slug",
            "content",
            "thumbnail",
            "category",
            "status",
            "like_count",
            "author_id",
            "author",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ArticleListSerializer(ArticleSerializer):
    comment_count = serializers.IntegerField(read_only=True, default=0)

    class Meta(ArticleSerializer.Meta):
        fields = [*ArticleSerializer.Meta.fields, "comment_count"]
        read_only_fields = fields


class ArticleDetailSerializer(ArticleSerializer):
    comments = ArticleCommentSerializer(many=True, read_only=True)

    class Meta(ArticleSerializer.Meta):
        fields = [*ArticleSerializer.Meta.fields, "comments"]
        read_only_fields = fields


class ArticleWriteSerializer(serializers.Serializer):
    """Validate create (full) and update (partial) payloads.

    Ownership, slug, status, and counters are never writable here.
    """

    title = serializers.CharField(max_length=255, allow_blank=False, trim_whitespace=True)
    content = serializers.CharField(allow_blank=False, trim_whitespace=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    thumbnail = serializers.URLField(max_length=1000, required=False, allow_blank=True, allow_null=True)

    @staticmethod
    def validate_content(value):
        if not value.strip():
            raise serializers.ValidationError("Content is required")
        return value


class ModerationSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in MODERATION_TARGETS])


class ListingQuerySerializer(serializers.Serializer):
    """Query-string parameters accepted by the article listing."""

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_SIZE, default=DEFAULT_PAGE_SIZE)
    status = serializers.ChoiceField(choices=ArticleStatus.choices, required=False)
    category = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)

    def to_params(self) -> ListingParams:
        data = self.validated_data
        return ListingParams(
            page=data["page"],
            limit=data["limit"],
            status=data.get("status") or None,
            category=data.get("category") or None,
            search=data.get("search") or None,
        )


__all__ = [
    "ArticleDetailSerializer",
    "ArticleListSerializer",
    "ArticleSerializer",
    "ArticleWriteSerializer",
    "AuthorSerializer",
    "CommenterSerializer",
    "ListingQuerySerializer",
    "ModerationSerializer",
]
