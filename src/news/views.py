"""Article endpoints gated by PolicyPermission and backed by news.services."""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from access_control.permissions import PolicyPermission
from core.response import BaseAPIView, BaseViewSet, api_response, paginated
from . import services
from .queries import list_articles
from .serializers import (
    ArticleDetailSerializer,
    ArticleListSerializer,
    ArticleSerializer,
    ArticleWriteSerializer,
    ListingQuerySerializer,
    ModerationSerializer,
)


class NewsViewSet(BaseViewSet):
    permission_classes = [PolicyPermission]
    policy_element = "article"
    policy_actions = {
        "create": "create",
        "update": "update",
        "partial_update": "update",
        "destroy": "delete",
        "moderate": "moderate",
    }
    lookup_value_regex = r"\d+"

    # noinspection PyMethodMayBeStatic
    def list(self, request):
        """List articles visible to the caller with filters and pagination."""
        query = ListingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.to_params()
        items, total = list_articles(request.user, params)
        return api_response(
            paginated(ArticleListSerializer(items, many=True).data, params.page, params.limit, total)
        )

    # noinspection PyMethodMayBeStatic
    def retrieve(self, request, pk=None):
        article = services.get_article(request.user, article_id=int(pk))
        return api_response(ArticleDetailSerializer(article).data)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request, slug=None):
        article = services.get_article(request.user, slug=slug)
        return api_response(ArticleDetailSerializer(article).data)

    # noinspection PyMethodMayBeStatic
    def create(self, request):
        serializer = ArticleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        article = services.create_article(request.user, serializer.validated_data)
        return api_response(ArticleSerializer(article).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    # noinspection PyMethodMayBeStatic
    def _update(self, request, pk, partial: bool):
        serializer = ArticleWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        article = services.update_article(request.user, int(pk), serializer.validated_data)
        return api_response(ArticleSerializer(article).data)

    # noinspection PyMethodMayBeStatic
    def destroy(self, request, pk=None):
        services.delete_article(request.user, int(pk))
        # 204 responses must not include a body.
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post", "patch"], url_path="status")
    def moderate(self, request, pk=None):
        """Approve or reject a pending article."""
        serializer = ModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        article = services.moderate_article(request.user, int(pk), serializer.validated_data["status"])
        return api_response(ArticleSerializer(article).data)


class DashboardStatsView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return role-scoped article and user counts plus recent articles."""
        stats = services.dashboard_stats(request.user)
        stats["recent_news"] = ArticleSerializer(stats["recent_news"], many=True).data
        return api_response(stats)


__all__ = ["DashboardStatsView", "NewsViewSet"]
