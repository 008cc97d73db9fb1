# booking_admin/api/dependencies/auth.py
"""
Actor dependencies.

Authentication is performed by the host application, which stores the
authenticated admin's id on ``request.state.actor_id``. These dependencies only
read it back.
"""

from typing import Optional

from fastapi import Request

from ...core.exceptions import UnauthorizedException
from ...services.identity import resolve_actor_id


def get_current_actor_id(request: Request) -> Optional[str]:
    """Return the authenticated actor id for this request, if any."""
    return resolve_actor_id(getattr(request.state, "actor_id", None))


def require_actor_id(request: Request) -> str:
    """Like get_current_actor_id, but mutating routes refuse anonymous callers."""
    actor_id = get_current_actor_id(request)
    if actor_id is None:
        raise UnauthorizedException(
            "Authentication required", code="NOT_AUTHENTICATED"
        ).to_http_exception()
    return actor_id
