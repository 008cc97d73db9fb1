"""
Current-actor plumbing.

Authentication lives in the host application; this module only carries the
resulting actor id to code that needs it (the audit recorder).
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Callable, Iterator, Mapping, Optional

IdentityProvider = Callable[[], Optional[str]]

_current_actor_var: ContextVar[Optional[str]] = ContextVar("current_actor_id", default=None)


def set_current_actor_id(actor_id: Optional[str]) -> Token[Optional[str]]:
    return _current_actor_var.set(actor_id or None)


def reset_current_actor_id(token: Token[Optional[str]]) -> None:
    _current_actor_var.reset(token)


def get_current_actor_id() -> Optional[str]:
    return _current_actor_var.get()


@contextmanager
def actor_context(actor_id: Optional[str]) -> Iterator[None]:
    """Run a block with ``actor_id`` as the current actor."""
    token = set_current_actor_id(actor_id)
    try:
        yield
    finally:
        reset_current_actor_id(token)


def resolve_actor_id(actor: Any | None) -> Optional[str]:
    """Pull an actor id out of a plain id, a mapping, or a user-like object."""
    if actor is None:
        return None
    if isinstance(actor, str):
        return actor.strip() or None
    if isinstance(actor, Mapping):
        value = _extract_value(actor, ("id", "actor_id", "user_id"))
    else:
        value = _first_attr(actor, ("id", "actor_id", "user_id"))
    if value is None:
        return None
    return str(value).strip() or None


def _first_attr(obj: Any, names: tuple[str, ...]) -> Any | None:
    for name in names:
        if hasattr(obj, name):
            value = getattr(obj, name)
            if value is not None:
                return value
    return None


def _extract_value(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any | None:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
