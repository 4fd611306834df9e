"""Project-wide plumbing: settings, routing, middleware, error envelope."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = "core"
    verbose_name = "Newsdesk core"
