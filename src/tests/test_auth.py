"""Authentication flows and the bearer credential verifier."""

from __future__ import annotations

import time
import uuid
from unittest import mock

import jwt
from django.conf import settings
from django.test import SimpleTestCase
from rest_framework.test import APIClient

from access_control.roles import Role
from authentication.services import BlocklistUnavailable, Identity, TokenService
from tests.utils import DEFAULT_PASSWORD, FakeRedisTestCase, create_user


def _encode(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.SECRET_KEY, algorithm=TokenService.ALGORITHM)


def _claims(**overrides) -> dict:
    now = int(time.time())
    claims = {
        "sub": str(uuid.uuid4()),
        "email": "someone@example.com",
        "role": "EDITOR",
        "jti": "jti-1",
        "iat": now,
        "exp": now + 3600,
        "type": "access",
    }
    claims.update(overrides)
    return claims


class TokenVerifyTests(SimpleTestCase):
    """verify() returns an Identity or None and never raises."""

    def test_valid_token_yields_identity(self):
        claims = _claims()
        identity = TokenService.verify(_encode(claims))

        self.assertIsInstance(identity, Identity)
        self.assertEqual(str(identity.user_id), claims["sub"])
        self.assertEqual(identity.role, Role.EDITOR)
        self.assertEqual(identity.email, "someone@example.com")
        self.assertTrue(identity.is_authenticated)
        self.assertFalse(identity.is_admin)

    def test_expired_token_is_invalid(self):
        now = int(time.time())
        self.assertIsNone(TokenService.verify(_encode(_claims(exp=now - 60, iat=now - 120))))

    def test_bad_signature_is_invalid(self):
        self.assertIsNone(TokenService.verify(_encode(_claims(), secret="another-secret")))

    def test_garbage_is_invalid(self):
        self.assertIsNone(TokenService.verify("not-a-jwt"))
        self.assertIsNone(TokenService.verify(""))
        self.assertIsNone(TokenService.verify(None))

    def test_unknown_role_is_invalid(self):
        self.assertIsNone(TokenService.verify(_encode(_claims(role="SUPERUSER"))))

    def test_malformed_subject_is_invalid(self):
        self.assertIsNone(TokenService.verify(_encode(_claims(sub="42"))))

    def test_wrong_token_type_is_invalid(self):
        self.assertIsNone(TokenService.verify(_encode(_claims(type="refresh"))))

    def test_issued_tokens_last_seven_days(self):
        user = mock.Mock(id=uuid.uuid4(), email="a@example.com", role=Role.ADMIN)
        payload = TokenService.decode_token(TokenService.generate_token(user))

        self.assertEqual(payload["exp"] - payload["iat"], 7 * 24 * 3600)
        self.assertEqual(payload["role"], "ADMIN")
        self.assertEqual(payload["email"], "a@example.com")


class AuthFlowTests(FakeRedisTestCase):
    """End-to-end tests covering register, login, logout, and profile."""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user("reader@example.com", Role.USER)
        cls.editor = create_user("editor@example.com", Role.EDITOR)

    def setUp(self):
        self.api_client: APIClient = APIClient()

    def _login(self, email: str) -> str:
        response = self.api_client.post(
            "/auth/login/", {"email": email, "password": DEFAULT_PASSWORD}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        return response.json()["data"]["access"]

    def test_register_creates_reader_account(self):
        payload = {"name": "New Reader", "email": "new@example.com", "password": "NewPass123!"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(body["errors"], [])
        self.assertEqual(body["data"]["email"], payload["email"])
        self.assertEqual(body["data"]["role"], "USER")

    def test_register_ignores_requested_role(self):
        payload = {
            "name": "Sneaky",
            "email": "sneaky@example.com",
            "password": "NewPass123!",
            "role": "ADMIN",
        }
        response = self.api_client.post("/auth/register/", payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["role"], "USER")

    def test_register_duplicate_email_is_rejected(self):
        payload = {"name": "Dup", "email": self.user.email, "password": "NewPass123!"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 400)
        self.assertIsNone(body["data"])
        self.assertIn("email", body["errors"][0])

    def test_login_returns_token_and_profile(self):
        response = self.api_client.post(
            "/auth/login/",
            {"email": self.editor.email, "password": DEFAULT_PASSWORD},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", body["data"])
        self.assertEqual(body["data"]["user"]["role"], "EDITOR")
        identity = TokenService.verify(body["data"]["access"])
        self.assertEqual(identity.user_id, self.editor.id)

    def test_login_invalid_credentials_401(self):
        response = self.api_client.post(
            "/auth/login/", {"email": self.user.email, "password": "wrongpass"}, format="json"
        )
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_login_inactive_user_401(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        response = self.api_client.post(
            "/auth/login/", {"email": self.user.email, "password": DEFAULT_PASSWORD}, format="json"
        )
        self.assertEqual(response.status_code, 401)

    def test_me_requires_credentials(self):
        self.assertEqual(self.api_client.get("/auth/me/").status_code, 401)

    def test_me_returns_profile(self):
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {self._login(self.user.email)}")
        response = self.api_client.get("/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], self.user.email)

    def test_logout_requires_credentials(self):
        response = self.api_client.post("/auth/logout/")
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_logout_blocklists_token(self):
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {self._login(self.editor.email)}")

        logout = self.api_client.post("/auth/logout/")
        self.assertEqual(logout.status_code, 204)
        self.assertEqual(logout.content, b"")

        # The token is now ignored, so the caller is anonymous.
        self.assertEqual(self.api_client.get("/auth/me/").status_code, 401)
        create = self.api_client.post("/news/", {"title": "T", "content": "C"}, format="json")
        self.assertEqual(create.status_code, 401)

    def test_invalid_token_reads_as_anonymous(self):
        self.api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        self.assertEqual(self.api_client.get("/news/").status_code, 200)
        create = self.api_client.post("/news/", {"title": "T", "content": "C"}, format="json")
        self.assertEqual(create.status_code, 401)

    def test_role_claim_is_trusted_until_reissue(self):
        token = self._login(self.user.email)
        self.user.role = Role.EDITOR
        self.user.save(update_fields=["role"])

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = client.post("/news/", {"title": "Promoted", "content": "C"}, format="json")
        self.assertEqual(response.status_code, 403)

        client.credentials(HTTP_AUTHORIZATION=f"Bearer {self._login(self.user.email)}")
        response = client.post("/news/", {"title": "Promoted", "content": "C"}, format="json")
        self.assertEqual(response.status_code, 201)

    def test_blocklist_unavailable_returns_503(self):
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {self._login(self.user.email)}")

        with mock.patch.object(
            TokenService,
            "is_token_blocked",
            side_effect=BlocklistUnavailable("Redis unavailable while checking blocklist"),
        ):
            response = self.api_client.get("/news/")

        body = response.json()
        self.assertEqual(response.status_code, 503)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])
