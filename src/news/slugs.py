"""URL slug derivation with sequential collision probing."""

import re
from typing import Optional

from .models import Article

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

FALLBACK_SLUG = "article"


def slugify_title(title: str) -> str:
    """Lower-case, collapse each run of non-[a-z0-9] into one hyphen, trim hyphens.

    >>> slugify_title("Eco Wins!")
    'eco-wins'
    """
    slug = _NON_ALNUM_RUN.sub("-", title.lower()).strip("-")
    return slug or FALLBACK_SLUG


def slug_taken(slug: str, exclude_pk: Optional[int] = None) -> bool:
    qs = Article.objects.filter(slug=slug)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def unique_slug(title: str, exclude_pk: Optional[int] = None) -> str:
    """Return the first free slug among ``base``, ``base-1``, ``base-2``, ...

    ``exclude_pk`` keeps an article's own current slug from counting as a
    collision when it is renamed. Probing is not locked; the unique
    constraint on ``Article.slug`` is what finally decides.
    """
    base = slugify_title(title)
    candidate = base
    counter = 1
    while slug_taken(candidate, exclude_pk):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


__all__ = ["FALLBACK_SLUG", "slug_taken", "slugify_title", "unique_slug"]
