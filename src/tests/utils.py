"""Shared helpers for tests (user/article factories, fake Redis, auth clients)."""

from __future__ import annotations

from typing import Dict
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from access_control.roles import Role
from authentication.managers import UserManager
from authentication.services import TokenService
from news.models import Article
from news.slugs import unique_slug
from news.state_machine import ArticleStatus

User = get_user_model()

DEFAULT_PASSWORD = "StrongPass123"


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


class FakeRedisTestCase(TestCase):
    """TestCase whose token blocklist lives in an in-memory FakeRedis."""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.redis_patcher = mock.patch(
            "authentication.services.get_redis_client", return_value=cls.fake_redis
        )
        cls.redis_patcher.start()

    @classmethod
    def tearDownClass(cls):
        cls.redis_patcher.stop()
        super().tearDownClass()


def create_user(email: str, role: Role = Role.USER, password: str = DEFAULT_PASSWORD, **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    extra.setdefault("name", email.split("@", 1)[0].title())
    return User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        role=role,
        **extra,
    )


def create_article(author, title: str = "Sample", status: str = ArticleStatus.APPROVED, **extra) -> Article:
    """Insert an article directly, bypassing lifecycle rules."""

    extra.setdefault("content", f"Body of {title}")
    return Article.objects.create(
        title=title,
        slug=unique_slug(title),
        status=status,
        author=author,
        **extra,
    )


def auth_client(user) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {TokenService.generate_token(user)}")
    return client
