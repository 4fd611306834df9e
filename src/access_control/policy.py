"""Access control evaluator for articles, comments, and likes.

The permission matrix is expressed as one ``AccessRule`` per (role, element)
pair, using the same own/all flag vocabulary as a database-backed RBAC table.
Roles form a closed enum, so the rules live in code.

``evaluate`` returns a ``Decision`` without side effects. ``enforce`` turns a
non-allow decision into the matching DRF exception:

- anonymous callers attempting a write get ``NotAuthenticated``;
- reads of resources the caller may not see get ``NotFound`` so that the
  resource's existence is not confirmed;
- writes the caller's role or ownership does not cover get ``PermissionDenied``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from rest_framework.exceptions import NotAuthenticated, NotFound, PermissionDenied

from news.state_machine import ArticleStatus
from .roles import Role

if TYPE_CHECKING:  # pragma: no cover
    from authentication.services import Identity


class Element(str, enum.Enum):
    """Resource kinds guarded by the evaluator."""

    ARTICLE = "article"
    COMMENT = "comment"
    LIKE = "like"


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MODERATE = "moderate"
    TOGGLE = "toggle"


class Decision(enum.Enum):
    ALLOW = "allow"
    NOT_AUTHENTICATED = "not_authenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessRule:
    """Permission flags binding a role to an element."""

    can_read_own: bool = False
    can_read_all: bool = False
    can_create: bool = False
    can_update_own: bool = False
    can_update_all: bool = False
    can_delete_own: bool = False
    can_delete_all: bool = False
    can_moderate: bool = False
    can_toggle: bool = False


_COMMENTER = AccessRule(can_create=True, can_update_own=True, can_delete_own=True)

ACCESS_RULES: dict[tuple[Role, Element], AccessRule] = {
    (Role.ADMIN, Element.ARTICLE): AccessRule(
        can_read_own=True,
        can_read_all=True,
        can_create=True,
        can_update_own=True,
        can_update_all=True,
        can_delete_own=True,
        can_delete_all=True,
        can_moderate=True,
    ),
    (Role.EDITOR, Element.ARTICLE): AccessRule(
        can_read_own=True,
        can_create=True,
        can_update_own=True,
        can_delete_own=True,
    ),
    (Role.ADMIN, Element.COMMENT): AccessRule(
        can_create=True,
        can_update_own=True,
        can_update_all=True,
        can_delete_own=True,
        can_delete_all=True,
    ),
    (Role.EDITOR, Element.COMMENT): _COMMENTER,
    (Role.USER, Element.COMMENT): _COMMENTER,
    (Role.ADMIN, Element.LIKE): AccessRule(can_toggle=True),
    (Role.EDITOR, Element.LIKE): AccessRule(can_toggle=True),
    (Role.USER, Element.LIKE): AccessRule(can_toggle=True),
}


def get_rule(role: Optional[Role], element: Element) -> Optional[AccessRule]:
    """Return the rule for ``role`` on ``element``; None means no grants."""
    if role is None:
        return None
    return ACCESS_RULES.get((Role(role), element))


def is_owner(identity: Optional[Identity], obj: Any) -> bool:
    """True when ``identity`` authored ``obj`` (articles use author_id, comments user_id)."""
    if identity is None or obj is None:
        return False
    owner_id = getattr(obj, "author_id", None)
    if owner_id is None:
        owner_id = getattr(obj, "user_id", None)
    return owner_id is not None and str(owner_id) == str(identity.user_id)


def role_may(role: Optional[Role], element: Element, action: Action) -> bool:
    """Coarse check ignoring ownership: could this role ever perform ``action``?"""
    rule = get_rule(role, element)
    if rule is None:
        return False
    if action is Action.READ:
        return True
    if action is Action.CREATE:
        return rule.can_create
    if action is Action.UPDATE:
        return rule.can_update_all or rule.can_update_own
    if action is Action.DELETE:
        return rule.can_delete_all or rule.can_delete_own
    if action is Action.MODERATE:
        return rule.can_moderate
    if action is Action.TOGGLE:
        return rule.can_toggle
    return False


def _is_published(article: Any) -> bool:
    return article is not None and article.status == ArticleStatus.APPROVED


def evaluate(
    identity: Optional[Identity],
    action: Action,
    element: Element,
    obj: Any = None,
) -> Decision:
    """Decide whether ``identity`` may perform ``action`` on ``obj``.

    ``obj`` is the article itself for article actions, the target article for
    comment creation and like toggles, and the comment for comment edits and
    deletes.
    """
    if action is Action.READ:
        return _evaluate_read(identity, element, obj)

    if identity is None:
        return Decision.NOT_AUTHENTICATED

    rule = get_rule(identity.role, element)
    if rule is None:
        return Decision.FORBIDDEN

    if action is Action.CREATE:
        if not rule.can_create:
            return Decision.FORBIDDEN
        if element is Element.COMMENT and not _is_published(obj):
            return Decision.NOT_FOUND
        return Decision.ALLOW

    if action is Action.TOGGLE:
        if not rule.can_toggle:
            return Decision.FORBIDDEN
        return _evaluate_read(identity, Element.ARTICLE, obj)

    if action is Action.MODERATE:
        return Decision.ALLOW if rule.can_moderate else Decision.FORBIDDEN

    owner = is_owner(identity, obj)
    if action is Action.UPDATE:
        allowed = rule.can_update_all or (rule.can_update_own and owner)
    elif action is Action.DELETE:
        allowed = rule.can_delete_all or (rule.can_delete_own and owner)
    else:
        allowed = False
    return Decision.ALLOW if allowed else Decision.FORBIDDEN


def _evaluate_read(identity: Optional[Identity], element: Element, obj: Any) -> Decision:
    if element is not Element.ARTICLE:
        return Decision.ALLOW
    if obj is None:
        return Decision.NOT_FOUND
    if _is_published(obj):
        return Decision.ALLOW
    if identity is None:
        return Decision.NOT_FOUND
    rule = get_rule(identity.role, Element.ARTICLE)
    if rule is None:
        return Decision.NOT_FOUND
    if rule.can_read_all or (rule.can_read_own and is_owner(identity, obj)):
        return Decision.ALLOW
    return Decision.NOT_FOUND


def enforce(
    identity: Optional[Identity],
    action: Action,
    element: Element,
    obj: Any = None,
    not_found_message: str = "Not found.",
) -> None:
    """Raise the DRF exception matching a non-allow decision."""
    decision = evaluate(identity, action, element, obj)
    if decision is Decision.ALLOW:
        return
    if decision is Decision.NOT_AUTHENTICATED:
        raise NotAuthenticated("Authentication required")
    if decision is Decision.NOT_FOUND:
        raise NotFound(not_found_message)
    raise PermissionDenied()


__all__ = [
    "ACCESS_RULES",
    "AccessRule",
    "Action",
    "Decision",
    "Element",
    "enforce",
    "evaluate",
    "get_rule",
    "is_owner",
    "role_may",
]
