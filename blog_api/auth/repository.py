"""
User persistence helpers.
"""

from __future__ import annotations

from blog_api.core import db

_USER_COLUMNS = "id, email, name, password_hash, status, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, email: str, name: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (email, name, password_hash)
        VALUES ($1, $2, $3)
        RETURNING {_USER_COLUMNS}
        """,
        normalize_email(email),
        name.strip(),
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )
