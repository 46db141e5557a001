"""Authorization policy for forum content.

A single table decides every mutating action on posts, comments and tags.
The functions here perform no I/O: callers pass the resolved identity and the
username recorded as the resource owner.
"""
from __future__ import annotations

from enum import Enum

from forum_core.core.errors import PermissionDeniedError
from forum_core.services.session_codec import Identity

__all__ = ["Action", "Decision", "authorize", "can", "require"]


class Action(str, Enum):
    """Actions the policy can rule on."""

    VIEW = "view"
    CREATE_POST = "create_post"
    EDIT_POST = "edit_post"
    DELETE_POST = "delete_post"
    CREATE_COMMENT = "create_comment"
    EDIT_COMMENT = "edit_comment"
    DELETE_COMMENT = "delete_comment"
    CREATE_TAG = "create_tag"
    EDIT_TAG = "edit_tag"
    DELETE_TAG = "delete_tag"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


_ANYONE = "anyone"
_AUTHENTICATED = "authenticated"
_OWNER_OR_ADMIN = "owner_or_admin"
_ADMIN = "admin"

RULES: dict[Action, str] = {
    Action.VIEW: _ANYONE,
    Action.CREATE_POST: _AUTHENTICATED,
    Action.CREATE_COMMENT: _AUTHENTICATED,
    Action.EDIT_POST: _OWNER_OR_ADMIN,
    Action.EDIT_COMMENT: _OWNER_OR_ADMIN,
    Action.DELETE_POST: _ADMIN,
    Action.DELETE_COMMENT: _ADMIN,
    Action.CREATE_TAG: _ADMIN,
    Action.EDIT_TAG: _ADMIN,
    Action.DELETE_TAG: _ADMIN,
}


def authorize(caller: Identity | None, owner: str | None, action: Action) -> Decision:
    """Return the policy decision for ``caller`` performing ``action``.

    Args:
        caller: Verified identity of the requester, or None when anonymous.
        owner: Username recorded as author of the target resource, if any.
        action: The action being attempted.
    """
    rule = RULES[action]
    if rule == _ANYONE:
        return Decision.ALLOW
    if caller is None:
        return Decision.DENY
    if rule == _AUTHENTICATED:
        return Decision.ALLOW
    if caller.is_admin:
        return Decision.ALLOW
    if rule == _OWNER_OR_ADMIN and owner is not None and caller.username == owner:
        return Decision.ALLOW
    return Decision.DENY


def can(caller: Identity | None, owner: str | None, action: Action) -> bool:
    """Boolean form of :func:`authorize`, handy for edit/delete affordances."""
    return authorize(caller, owner, action) is Decision.ALLOW


def require(caller: Identity | None, owner: str | None, action: Action) -> None:
    """Raise PermissionDeniedError unless the policy allows the action."""
    if authorize(caller, owner, action) is Decision.DENY:
        raise PermissionDeniedError(f"Not permitted to {action.value.replace('_', ' ')}")
