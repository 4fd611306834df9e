"""Routing for comment and like endpoints."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import CommentViewSet, LikeViewSet

router = SimpleRouter()
router.register(r"comments", CommentViewSet, basename="comment")
router.register(r"likes", LikeViewSet, basename="like")

urlpatterns = [
    path("", include(router.urls)),
]
