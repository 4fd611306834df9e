"""Article moderation state machine.

States:
    DRAFT        (reserved; nothing enters or leaves it)
    PENDING  →  APPROVED
        ↓
    REJECTED

EDITOR-authored articles start PENDING, ADMIN-authored ones start APPROVED.
Moderation (ADMIN only) is the single way out of PENDING. APPROVED and
REJECTED are terminal: there is no unpublish and no resubmission.
"""

from typing import Dict, Set

from django.db import models
from rest_framework.exceptions import ValidationError

from access_control.roles import Role


class ArticleStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"


VALID_TRANSITIONS: Dict[str, Set[str]] = {
    ArticleStatus.DRAFT: set(),
    ArticleStatus.PENDING: {ArticleStatus.APPROVED, ArticleStatus.REJECTED},
    ArticleStatus.APPROVED: set(),  # Terminal state
    ArticleStatus.REJECTED: set(),  # Terminal state
}

MODERATION_TARGETS = (ArticleStatus.APPROVED, ArticleStatus.REJECTED)


def initial_status_for(role: Role) -> ArticleStatus:
    """Status a freshly created article gets for its author's role."""
    if role == Role.ADMIN:
        return ArticleStatus.APPROVED
    return ArticleStatus.PENDING


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in VALID_TRANSITIONS.get(from_status, set())


def ensure_transition(from_status: str, to_status: str) -> None:
    """Raise a ValidationError on ``status`` when the move is not allowed."""
    if to_status not in MODERATION_TARGETS:
        raise ValidationError({"status": [f"Target status must be one of: {', '.join(MODERATION_TARGETS)}."]})
    if not can_transition(from_status, to_status):
        raise ValidationError(
            {"status": [f"Cannot move an article from {from_status} to {to_status}."]}
        )


__all__ = [
    "ArticleStatus",
    "MODERATION_TARGETS",
    "VALID_TRANSITIONS",
    "can_transition",
    "ensure_transition",
    "initial_status_for",
]
