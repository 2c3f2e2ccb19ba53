"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Request

from .context import RequestContext, get_request_context, require_authenticated


async def current_context(request: Request) -> RequestContext:
    return get_request_context(request)


async def require_user(ctx: RequestContext = Depends(current_context)) -> int:
    return require_authenticated(ctx)
