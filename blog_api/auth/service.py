"""
Auth business logic.

Called from GraphQL resolvers; failures are raised as BusinessError
variants so the GraphQL error normalizer can shape them.
"""

from __future__ import annotations

from blog_api.core.config import Settings
from blog_api.errors import AuthenticationError, ValidationFailed, validate_input

from . import repository, schemas, security


async def register(*, email: str, name: str, password: str) -> dict:
    payload = validate_input(schemas.RegisterRequest, email=email, name=name, password=password)

    existing = await repository.get_user_by_email(payload.email)
    if existing is not None:
        raise ValidationFailed(
            "User exists already!",
            data=[{"field": "email", "message": "Email is already registered."}],
        )

    password_hash = security.hash_password(payload.password)
    return await repository.create_user(
        email=payload.email,
        name=payload.name,
        password_hash=password_hash,
    )


async def login(*, email: str, password: str, settings: Settings) -> tuple[str, dict]:
    """
    Check credentials and return (access_token, user_row).
    """
    payload = validate_input(schemas.LoginRequest, email=email, password=password)

    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise AuthenticationError("Invalid email or password.")

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise AuthenticationError("Invalid email or password.")

    token = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
        settings=settings,
    )
    return token, user_row
