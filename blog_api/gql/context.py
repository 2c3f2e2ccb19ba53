"""
GraphQL execution context.

Resolvers read the auth outcome from `info.context["auth"]` and enforce
their own policy with `require_authenticated`.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from blog_api.auth.context import RequestContext, get_request_context
from blog_api.core.config import Settings, get_settings


async def get_context(request: Request, settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return {"auth": get_request_context(request), "settings": settings}


def auth_from(info: Any) -> RequestContext:
    ctx = info.context.get("auth")
    return ctx if isinstance(ctx, RequestContext) else RequestContext.anonymous()


def settings_from(info: Any) -> Settings:
    return info.context["settings"]
