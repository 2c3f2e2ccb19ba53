"""
Auth gate: resolve who is calling, never reject.

Unauthenticated traffic must still reach public GraphQL reads, so this
middleware only records the outcome on `request.state.context`. Handlers
that need a user call `require_authenticated` themselves.
"""

from __future__ import annotations

import logging

from fastapi import Request

from blog_api.core.config import Settings, get_settings

from . import security
from .context import RequestContext

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def resolve_context(authorization: str | None, settings: Settings) -> RequestContext:
    token = extract_bearer_token(authorization)
    if token is None:
        return RequestContext.anonymous()

    try:
        payload = security.decode_access_token(token, settings)
        user_id = security.user_id_from_payload(payload)
    except security.AuthSecurityError as exc:
        logger.debug("auth_token_rejected reason=%s", exc)
        return RequestContext.anonymous()

    return RequestContext(is_authenticated=True, user_id=user_id)


async def auth_gate(request: Request, call_next):
    settings = get_settings(request)
    request.state.context = resolve_context(request.headers.get("Authorization"), settings)
    return await call_next(request)
