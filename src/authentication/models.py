"""Newsroom accounts: identified by email, holding exactly one role."""

import uuid
from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from access_control.roles import Role
from .managers import UserManager


class User(AbstractBaseUser):
    """An account that authors articles, comments, or likes.

    ``role`` is written only by administrative tooling (seed command, shell,
    ``createsuperuser``); no API endpoint accepts it. Tokens carry the role
    they were issued with, so a change applies from the next login.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150)
    password_hash = models.CharField(max_length=128)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER)
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = ["name"]

    objects = UserManager()

    class Meta:
        ordering = ["-date_joined"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.email} ({self.role})"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name.split(" ", 1)[0] if self.name else self.email

    # Django's own hashers are bypassed; bcrypt lives in the manager.
    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        self.password_hash = UserManager.hash_password(raw_password) if raw_password else ""

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        return UserManager.verify_password(self, raw_password)


__all__ = ["User"]
