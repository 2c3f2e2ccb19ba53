"""
REST endpoint for image replacement.

GraphQL only carries JSON, so clients upload post images here first and
then pass the stored path into a GraphQL mutation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from blog_api.auth import dependencies as auth_dependencies
from blog_api.core.config import Settings, get_settings

from . import storage

router = APIRouter()


@router.put("/post-image")
async def replace_post_image(
    _: int = Depends(auth_dependencies.require_user),
    image: UploadFile | None = File(default=None),
    old_path: str | None = Form(default=None, alias="oldPath"),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Store a new post image and drop the one it replaces.

    Note: `filePath` echoes `oldPath` back rather than the new location;
    existing clients depend on this.
    """
    stored = await storage.accept_upload(image, settings)
    if stored is None:
        return JSONResponse(status_code=200, content={"message": "No file provided!"})

    if old_path:
        await storage.delete_image(old_path, settings)

    return JSONResponse(
        status_code=201,
        content={"message": "File stored", "filePath": old_path},
    )
