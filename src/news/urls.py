"""Routing for article and dashboard endpoints."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DashboardStatsView, NewsViewSet

router = DefaultRouter()
router.register(r"news", NewsViewSet, basename="news")

urlpatterns = [
    path("", include(router.urls)),
    path("dashboard/stats/", DashboardStatsView.as_view(), name="dashboard-stats"),
]
