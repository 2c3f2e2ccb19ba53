"""
Post persistence helpers.
"""

from __future__ import annotations

from blog_api.core import db

_POST_COLUMNS = """
    p.id, p.title, p.content, p.image_url, p.creator_id,
    u.name AS creator_name, p.created_at, p.updated_at
"""


async def count_posts() -> int:
    value = await db.fetch_value("SELECT count(*) FROM posts")
    return int(value or 0)


async def list_posts(*, limit: int, offset: int) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_POST_COLUMNS}
        FROM posts p
        JOIN users u ON u.id = p.creator_id
        ORDER BY p.created_at DESC, p.id DESC
        LIMIT $1 OFFSET $2
        """,
        limit,
        offset,
    )


async def get_post(post_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_POST_COLUMNS}
        FROM posts p
        JOIN users u ON u.id = p.creator_id
        WHERE p.id = $1
        """,
        post_id,
    )


async def create_post(*, title: str, content: str, image_url: str, creator_id: int) -> dict:
    row = await db.fetch_one(
        """
        WITH inserted AS (
            INSERT INTO posts (title, content, image_url, creator_id)
            VALUES ($1, $2, $3, $4)
            RETURNING *
        )
        SELECT p.id, p.title, p.content, p.image_url, p.creator_id,
               u.name AS creator_name, p.created_at, p.updated_at
        FROM inserted p
        JOIN users u ON u.id = p.creator_id
        """,
        title,
        content,
        image_url,
        creator_id,
    )
    if row is None:
        raise RuntimeError("Failed to create post.")
    return row


async def delete_post(post_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM posts
        WHERE id = $1
        RETURNING id
        """,
        post_id,
    )
    return row is not None


async def count_other_posts_with_image(image_url: str, *, exclude_post_id: int) -> int:
    value = await db.fetch_value(
        """
        SELECT count(*)
        FROM posts
        WHERE image_url = $1
          AND id <> $2
        """,
        image_url,
        exclude_post_id,
    )
    return int(value or 0)
