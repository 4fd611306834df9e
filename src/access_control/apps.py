"""Django app for the role matrix and the permission class built on it."""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    name = "access_control"
    verbose_name = "Access control"

    def ready(self) -> None:
        # Registers the policy wiring checks run by ``manage.py check``.
        from . import checks  # noqa: F401
