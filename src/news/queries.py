"""Visibility-filtered listing queries for articles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from django.db.models import Count, Q, QuerySet

from .models import Article
from .state_machine import ArticleStatus

if TYPE_CHECKING:  # pragma: no cover
    from authentication.services import Identity

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
LISTING_ORDER = ("-created_at", "-id")


@dataclass(frozen=True)
class ListingParams:
    """Validated listing input."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    status: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def visibility_branches(identity: Optional[Identity]) -> Optional[list[Q]]:
    """OR-branches of the visibility predicate; None means unrestricted.

    - anonymous: published only;
    - authenticated non-admin: published, or authored by the caller;
    - admin: everything.
    """
    if identity is None:
        return [Q(status=ArticleStatus.APPROVED)]
    if identity.is_admin:
        return None
    return [Q(status=ArticleStatus.APPROVED), Q(author_id=identity.user_id)]


def visibility_predicate(identity: Optional[Identity], status: Optional[str] = None) -> Q:
    """Visibility predicate with an optional status filter.

    The status filter is applied to each OR branch independently, so an
    editor asking for PENDING gets only their own pending articles.
    """
    branches = visibility_branches(identity)
    if branches is None:
        return Q(status=status) if status else Q()

    predicate = Q()
    for branch in branches:
        if status:
            branch = branch & Q(status=status)
        predicate |= branch
    return predicate


def listing_predicate(identity: Optional[Identity], params: ListingParams) -> Q:
    """Full listing predicate: visibility AND category AND search.

    Search is conjoined with visibility so that matching text can never
    surface an article the caller may not see.
    """
    predicate = visibility_predicate(identity, params.status)
    if params.category:
        predicate &= Q(category=params.category)
    if params.search:
        predicate &= Q(title__icontains=params.search) | Q(content__icontains=params.search)
    return predicate


def visible_articles(identity: Optional[Identity], params: Optional[ListingParams] = None) -> QuerySet:
    """Ordered queryset of articles the caller may list."""
    params = params or ListingParams()
    return (
        Article.objects.filter(listing_predicate(identity, params))
        .select_related("author")
        .order_by(*LISTING_ORDER)
    )


def list_articles(identity: Optional[Identity], params: ListingParams) -> tuple[list[Article], int]:
    """Return one page of visible articles plus the total match count."""
    qs = visible_articles(identity, params)
    total = qs.count()
    items = list(
        qs.annotate(comment_count=Count("comments"))[params.skip : params.skip + params.limit]
    )
    return items, total


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "LISTING_ORDER",
    "ListingParams",
    "MAX_PAGE_SIZE",
    "list_articles",
    "listing_predicate",
    "visibility_branches",
    "visibility_predicate",
    "visible_articles",
]
