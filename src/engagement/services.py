"""Likes and comments: toggle protocol and comment ownership rules."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F
from rest_framework.exceptions import AuthenticationFailed, NotFound

from access_control.policy import Action, Element, enforce
from core.exceptions import Conflict
from news.models import Article
from news.state_machine import ArticleStatus
from .models import Comment, Like

if TYPE_CHECKING:  # pragma: no cover
    from authentication.services import Identity

logger = logging.getLogger(__name__)

ARTICLE_NOT_FOUND = "Article not found"
COMMENT_NOT_FOUND = "Comment not found"
TOGGLE_ATTEMPTS = 2


@dataclass(frozen=True)
class LikeToggle:
    liked: bool
    total_likes: int

    def as_dict(self) -> dict:
        return asdict(self)


def _get_published_article(article_id: int) -> Article:
    article = Article.objects.filter(pk=article_id, status=ArticleStatus.APPROVED).first()
    if article is None:
        raise NotFound(ARTICLE_NOT_FOUND)
    return article


def _get_comment(comment_id: int) -> Comment:
    comment = Comment.objects.select_related("user").filter(pk=comment_id).first()
    if comment is None:
        raise NotFound(COMMENT_NOT_FOUND)
    return comment


def _insert_like(user_id: uuid.UUID, article_id: int) -> Like:
    return Like.objects.create(user_id=user_id, article_id=article_id)


def toggle_like(identity: Optional[Identity], article_id: int) -> LikeToggle:
    """Like the article if the caller has not, otherwise unlike it.

    The insert is attempted first, inside a savepoint; the unique
    (user, article) constraint rejecting it means the like already exists,
    so it is deleted instead. The counter moves by the same delta in the
    same transaction while the article row is locked. If the existing like
    disappears between the rejected insert and the delete, the whole toggle
    is retried once before giving up with Conflict.
    """
    for attempt in range(1, TOGGLE_ATTEMPTS + 1):
        with transaction.atomic():
            article = Article.objects.select_for_update().filter(pk=article_id).first()
            enforce(identity, Action.TOGGLE, Element.LIKE, article, not_found_message=ARTICLE_NOT_FOUND)

            try:
                with transaction.atomic():
                    _insert_like(identity.user_id, article.pk)
            except IntegrityError:
                removed, _ = Like.objects.filter(user_id=identity.user_id, article_id=article.pk).delete()
                if not removed:
                    # Nothing to remove, so the rejected insert was no duplicate;
                    # a token can outlive its account.
                    if not get_user_model().objects.filter(pk=identity.user_id, is_active=True).exists():
                        raise AuthenticationFailed("Account no longer exists")
                    logger.warning(
                        "Like toggle race on article %s for user %s (attempt %d/%d)",
                        article.pk,
                        identity.user_id,
                        attempt,
                        TOGGLE_ATTEMPTS,
                    )
                    continue
                delta = -1
            else:
                delta = 1

            Article.objects.filter(pk=article.pk).update(like_count=F("like_count") + delta)
            article.refresh_from_db(fields=["like_count"])
            return LikeToggle(liked=delta > 0, total_likes=article.like_count)

    raise Conflict("Could not toggle the like; retry the request.")


def like_status(identity: Optional[Identity], article_id: int) -> dict:
    """Total likes for a visible article and whether the caller is among them."""
    article = Article.objects.filter(pk=article_id).first()
    enforce(identity, Action.READ, Element.ARTICLE, article, not_found_message=ARTICLE_NOT_FOUND)

    likes = Like.objects.filter(article_id=article.pk)
    user_liked = identity is not None and likes.filter(user_id=identity.user_id).exists()
    return {"total_likes": likes.count(), "user_liked": user_liked}


def list_comments(article_id: int, page: int, limit: int) -> tuple[list[Comment], int]:
    """One page of comments on a published article, newest first."""
    article = _get_published_article(article_id)
    qs = Comment.objects.filter(article=article).select_related("user").order_by("-created_at", "-id")
    skip = (page - 1) * limit
    return list(qs[skip : skip + limit]), qs.count()


def create_comment(identity: Optional[Identity], article_id: int, content: str) -> Comment:
    """Comment on a published article; unpublished targets look missing."""
    article = Article.objects.filter(pk=article_id).first()
    enforce(identity, Action.CREATE, Element.COMMENT, article, not_found_message=ARTICLE_NOT_FOUND)
    comment = Comment.objects.create(article=article, user_id=identity.user_id, content=content)
    return Comment.objects.select_related("user").get(pk=comment.pk)


def edit_comment(identity: Optional[Identity], comment_id: int, content: str) -> Comment:
    comment = _get_comment(comment_id)
    enforce(identity, Action.UPDATE, Element.COMMENT, comment)
    comment.content = content
    comment.save(update_fields=["content", "updated_at"])
    return comment


def delete_comment(identity: Optional[Identity], comment_id: int) -> None:
    comment = _get_comment(comment_id)
    enforce(identity, Action.DELETE, Element.COMMENT, comment)
    comment.delete()
    logger.info("Comment %s deleted by %s", comment_id, identity.user_id)


__all__ = [
    "LikeToggle",
    "create_comment",
    "delete_comment",
    "edit_comment",
    "like_status",
    "list_comments",
    "toggle_like",
]
