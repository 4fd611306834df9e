"""Closed set of roles attached to every identity."""

from django.db import models


class Role(models.TextChoices):
    """Role carried by a user and embedded in issued credentials."""

    ADMIN = "ADMIN", "Admin"
    EDITOR = "EDITOR", "Editor"
    USER = "USER", "User"


__all__ = ["Role"]
