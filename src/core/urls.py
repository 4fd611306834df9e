"""Root URL configuration for the Newsdesk API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("auth/", include("authentication.urls")),
    path("", include("news.urls")),
    path("", include("engagement.urls")),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
]
