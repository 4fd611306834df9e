"""App configuration for the news (article lifecycle) app."""

from django.apps import AppConfig


class NewsConfig(AppConfig):
    """News app owns articles, their moderation status, and slugs."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "news"
