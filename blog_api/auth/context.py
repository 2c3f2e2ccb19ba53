"""
Per-request authentication outcome.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from blog_api.errors import AuthenticationError


@dataclass
class RequestContext:
    is_authenticated: bool = False
    user_id: int | None = None

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls(is_authenticated=False, user_id=None)


def get_request_context(request: Request) -> RequestContext:
    """
    Return the context resolved by the auth gate (anonymous if it never ran).
    """
    ctx = getattr(request.state, "context", None)
    if isinstance(ctx, RequestContext):
        return ctx
    return RequestContext.anonymous()


def require_authenticated(ctx: RequestContext) -> int:
    """
    Capability check for handlers that need a known user.

    Returns the user id, or raises AuthenticationError.
    """
    if not ctx.is_authenticated or ctx.user_id is None:
        raise AuthenticationError()
    return ctx.user_id
