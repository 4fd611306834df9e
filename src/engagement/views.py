"""Comment and like endpoints."""

from rest_framework import status
from rest_framework.response import Response

from access_control.permissions import PolicyPermission
from core.response import BaseViewSet, api_response, paginated
from . import services
from .serializers import (
    CommentContentSerializer,
    CommentCreateSerializer,
    CommentListQuerySerializer,
    CommentSerializer,
    NewsRefSerializer,
)


class CommentViewSet(BaseViewSet):
    permission_classes = [PolicyPermission]
    policy_element = "comment"
    policy_actions = {
        "create": "create",
        "update": "update",
        "partial_update": "update",
        "destroy": "delete",
    }
    lookup_value_regex = r"\d+"

    # noinspection PyMethodMayBeStatic
    def list(self, request):
        """Comments on a published article, newest first."""
        query = CommentListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        items, total = services.list_comments(data["news_id"], data["page"], data["limit"])
        return api_response(
            paginated(CommentSerializer(items, many=True).data, data["page"], data["limit"], total)
        )

    # noinspection PyMethodMayBeStatic
    def create(self, request):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.create_comment(
            request.user, serializer.validated_data["news_id"], serializer.validated_data["content"]
        )
        return api_response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = CommentContentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.edit_comment(request.user, int(pk), serializer.validated_data["content"])
        return api_response(CommentSerializer(comment).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    # noinspection PyMethodMayBeStatic
    def destroy(self, request, pk=None):
        services.delete_comment(request.user, int(pk))
        # 204 responses must not include a body.
        return Response(status=status.HTTP_204_NO_CONTENT)


class LikeViewSet(BaseViewSet):
    permission_classes = [PolicyPermission]
    policy_element = "like"
    policy_actions = {"create": "toggle"}

    # noinspection PyMethodMayBeStatic
    def list(self, request):
        """Like total for an article and whether the caller liked it."""
        query = NewsRefSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return api_response(services.like_status(request.user, query.validated_data["news_id"]))

    # noinspection PyMethodMayBeStatic
    def create(self, request):
        """Toggle the caller's like on an article."""
        serializer = NewsRefSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.toggle_like(request.user, serializer.validated_data["news_id"])
        return api_response(result.as_dict())


__all__ = ["CommentViewSet", "LikeViewSet"]
