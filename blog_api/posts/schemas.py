"""
Post input schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PostInput(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=5)
    image_url: str = Field(..., min_length=1, max_length=1000)
