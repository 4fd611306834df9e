"""Article lifecycle: create, read, update, moderate, delete.

Every operation takes the caller's ``Identity`` (None for anonymous) and asks
the access policy before touching the store. Reads of articles the caller may
not see raise NotFound; writes the caller may not perform raise
PermissionDenied.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from access_control.policy import Action, Element, enforce
from access_control.roles import Role
from core.exceptions import Conflict
from .models import Article
from .queries import visible_articles
from .slugs import slug_taken, unique_slug
from .state_machine import ArticleStatus, ensure_transition, initial_status_for

if TYPE_CHECKING:  # pragma: no cover
    from authentication.services import Identity

logger = logging.getLogger(__name__)

ARTICLE_NOT_FOUND = "Article not found"
EDITABLE_FIELDS = ("title", "content", "category", "thumbnail")
SLUG_ATTEMPTS = 2
RECENT_NEWS_LIMIT = 5


def _get_article(article_id: int) -> Article:
    article = Article.objects.select_related("author").filter(pk=article_id).first()
    if article is None:
        raise NotFound(ARTICLE_NOT_FOUND)
    return article


def _save_with_unique_slug(
    title: str,
    write: Callable[[str], Article],
    exclude_pk: Optional[int] = None,
) -> Article:
    """Pick a free slug and write; retry once if another writer took it first."""
    for attempt in range(1, SLUG_ATTEMPTS + 1):
        slug = unique_slug(title, exclude_pk=exclude_pk)
        try:
            with transaction.atomic():
                return write(slug)
        except IntegrityError:
            if not slug_taken(slug, exclude_pk=exclude_pk):
                raise
            logger.warning(
                "Slug %r was claimed concurrently (attempt %d/%d)", slug, attempt, SLUG_ATTEMPTS
            )
    raise Conflict("Could not allocate a unique slug for this title; retry the request.")


def get_article(
    identity: Optional[Identity],
    *,
    article_id: Optional[int] = None,
    slug: Optional[str] = None,
) -> Article:
    """Fetch one article by id or slug with its author and comments."""
    qs = Article.objects.select_related("author").prefetch_related("comments__user")
    if article_id is not None:
        article = qs.filter(pk=article_id).first()
    elif slug:
        article = qs.filter(slug=slug).first()
    else:
        article = None

    enforce(identity, Action.READ, Element.ARTICLE, article, not_found_message=ARTICLE_NOT_FOUND)
    return article


def create_article(identity: Optional[Identity], data: dict[str, Any]) -> Article:
    """Create an article; ADMIN articles publish immediately, EDITOR ones queue."""
    enforce(identity, Action.CREATE, Element.ARTICLE)
    status = initial_status_for(identity.role)

    def write(slug: str) -> Article:
        return Article.objects.create(
            title=data["title"],
            slug=slug,
            content=data["content"],
            category=data.get("category") or None,
            thumbnail=data.get("thumbnail") or None,
            status=status,
            author_id=identity.user_id,
        )

    article = _save_with_unique_slug(data["title"], write)
    logger.info(
        "Article %s created by %s (%s) as %s", article.pk, identity.user_id, identity.role, status
    )
    return article


def update_article(identity: Optional[Identity], article_id: int, changes: dict[str, Any]) -> Article:
    """Apply a partial update; a new title regenerates the slug."""
    article = _get_article(article_id)
    enforce(identity, Action.UPDATE, Element.ARTICLE, article)

    fields = [field for field in EDITABLE_FIELDS if field in changes]
    for field in fields:
        value = changes[field]
        if field in ("category", "thumbnail"):
            value = value or None
        setattr(article, field, value)

    if "title" in fields:
        def write(slug: str) -> Article:
            article.slug = slug
            article.save(update_fields=[*fields, "slug", "updated_at"])
            return article

        return _save_with_unique_slug(article.title, write, exclude_pk=article.pk)

    if fields:
        article.save(update_fields=[*fields, "updated_at"])
    return article


def moderate_article(identity: Optional[Identity], article_id: int, target_status: str) -> Article:
    """Move a PENDING article to APPROVED or REJECTED (ADMIN only)."""
    enforce(identity, Action.MODERATE, Element.ARTICLE)
    article = _get_article(article_id)
    ensure_transition(article.status, target_status)

    # Conditional update: only one of two concurrent moderations can win.
    updated = Article.objects.filter(pk=article.pk, status=article.status).update(
        status=target_status, updated_at=timezone.now()
    )
    if not updated:
        article.refresh_from_db(fields=["status"])
        ensure_transition(article.status, target_status)
        raise Conflict("Article status changed concurrently; retry the request.")

    logger.info(
        "Article %s moderated %s -> %s by %s", article.pk, article.status, target_status, identity.user_id
    )
    article.refresh_from_db()
    return article


def delete_article(identity: Optional[Identity], article_id: int) -> None:
    """Delete an article; its comments and likes go with it."""
    article = _get_article(article_id)
    enforce(identity, Action.DELETE, Element.ARTICLE, article)
    article.delete()
    logger.info("Article %s deleted by %s", article_id, identity.user_id)


def dashboard_stats(identity: Identity) -> dict[str, Any]:
    """Counts and recent articles scoped to the caller's role."""
    total_news = Article.objects.count()
    approved_news = Article.objects.filter(status=ArticleStatus.APPROVED).count()
    pending_news = 0
    total_users = 0

    if identity.role == Role.ADMIN:
        pending_news = Article.objects.filter(status=ArticleStatus.PENDING).count()
        total_users = get_user_model().objects.count()
    elif identity.role == Role.EDITOR:
        pending_news = Article.objects.filter(
            status=ArticleStatus.PENDING, author_id=identity.user_id
        ).count()

    return {
        "total_news": total_news,
        "approved_news": approved_news,
        "pending_news": pending_news,
        "total_users": total_users,
        "recent_news": list(visible_articles(identity)[:RECENT_NEWS_LIMIT]),
    }


__all__ = [
    "create_article",
    "dashboard_stats",
    "delete_article",
    "get_article",
    "moderate_article",
    "update_article",
]
