"""Account creation and bcrypt password handling for newsroom users."""

import bcrypt
from django.conf import settings
from django.contrib.auth.base_user import BaseUserManager

from access_control.roles import Role


class UserManager(BaseUserManager):
    """Create accounts by role; passwords are stored as bcrypt hashes only."""

    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        # Accounts are unique case-insensitively, so store one canonical form.
        return super().normalize_email(email or "").strip().lower()

    def create_user(self, email: str, password: str | None = None, role: Role = Role.USER, **extra_fields):
        """Create an account with ``role`` (readers by default)."""
        if not email:
            raise ValueError("An email address is required")
        if not password:
            raise ValueError("A password is required")

        user = self.model(email=self.normalize_email(email), role=Role(role), **extra_fields)
        user.password_hash = self.hash_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str, **extra_fields):
        """``manage.py createsuperuser`` provisions an ADMIN."""
        extra_fields.pop("role", None)
        return self.create_user(email, password, role=Role.ADMIN, **extra_fields)

    @staticmethod
    def hash_password(raw_password: str) -> str:
        rounds = getattr(settings, "BCRYPT_ROUNDS", 12)
        return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")

    @staticmethod
    def verify_password(user, raw_password: str) -> bool:
        """Compare against the stored hash; a missing or corrupt hash never matches."""
        if not user.password_hash or raw_password is None:
            return False
        try:
            return bcrypt.checkpw(raw_password.encode("utf-8"), user.password_hash.encode("ascii"))
        except ValueError:
            return False


__all__ = ["UserManager"]
