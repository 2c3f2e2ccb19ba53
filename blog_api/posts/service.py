"""
Post business logic.
"""

from __future__ import annotations

import logging

from blog_api.auth import repository as user_repository
from blog_api.core.config import Settings
from blog_api.errors import AuthenticationError, ForbiddenError, NotFoundError, validate_input
from blog_api.uploads import storage

from . import repository, schemas

POSTS_PER_PAGE = 10

logger = logging.getLogger(__name__)


async def list_posts(*, page: int = 1) -> tuple[list[dict], int]:
    page = max(int(page or 1), 1)
    total = await repository.count_posts()
    rows = await repository.list_posts(limit=POSTS_PER_PAGE, offset=(page - 1) * POSTS_PER_PAGE)
    return rows, total


async def get_post(post_id: int) -> dict:
    row = await repository.get_post(post_id)
    if row is None:
        raise NotFoundError("No post found!", data={"id": post_id})
    return row


async def create_post(*, user_id: int, title: str, content: str, image_url: str) -> dict:
    payload = validate_input(schemas.PostInput, title=title, content=content, image_url=image_url)

    user = await user_repository.get_user_by_id(user_id)
    if user is None:
        raise AuthenticationError("Invalid user.")

    return await repository.create_post(
        title=payload.title.strip(),
        content=payload.content.strip(),
        image_url=payload.image_url,
        creator_id=user_id,
    )


async def delete_post(*, user_id: int, post_id: int, settings: Settings) -> bool:
    """
    Delete an owned post, and its image unless another post still uses it.
    """
    row = await get_post(post_id)
    if int(row["creator_id"]) != user_id:
        raise ForbiddenError("Not authorized!")

    deleted = await repository.delete_post(post_id)
    if not deleted:
        raise NotFoundError("No post found!", data={"id": post_id})

    image_url = str(row.get("image_url") or "")
    if image_url:
        shared = await repository.count_other_posts_with_image(image_url, exclude_post_id=post_id)
        if shared:
            logger.info("post_image_kept post_id=%s image_url=%s shared_by=%s", post_id, image_url, shared)
        else:
            await storage.delete_image(image_url, settings)
    logger.info("post_deleted post_id=%s user_id=%s", post_id, user_id)
    return True
