"""
GraphQL types and resolvers.

Resolvers stay thin: parse arguments, check the caller when needed, and
delegate to the feature services. Services raise BusinessError variants,
which the router turns into error envelopes.
"""

from datetime import datetime
from typing import List

import strawberry
from strawberry.types import Info

from blog_api.auth import service as auth_service
from blog_api.auth.context import require_authenticated
from blog_api.errors import ValidationFailed
from blog_api.posts import service as post_service

from .context import auth_from, settings_from


def parse_id(value: strawberry.ID, *, field: str = "id") -> int:
    raw = str(value or "").strip()
    if not raw.isdigit():
        raise ValidationFailed(data=[{"field": field, "message": "Must be a numeric id."}])
    return int(raw)


@strawberry.type
class User:
    id: strawberry.ID
    email: str
    name: str
    status: str

    @classmethod
    def from_row(cls, row: dict) -> "User":
        return cls(
            id=strawberry.ID(str(row["id"])),
            email=str(row["email"]),
            name=str(row["name"]),
            status=str(row.get("status") or ""),
        )


@strawberry.type
class Post:
    id: strawberry.ID
    title: str
    content: str
    image_url: str
    creator_id: strawberry.ID
    creator_name: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> "Post":
        return cls(
            id=strawberry.ID(str(row["id"])),
            title=str(row["title"]),
            content=str(row["content"]),
            image_url=str(row["image_url"]),
            creator_id=strawberry.ID(str(row["creator_id"])),
            creator_name=str(row.get("creator_name") or ""),
            created_at=row["created_at"],
        )


@strawberry.type
class AuthData:
    token: str
    user_id: strawberry.ID


@strawberry.type
class PostData:
    posts: List[Post]
    total_posts: int


@strawberry.input
class UserInputData:
    email: str
    name: str
    password: str


@strawberry.input
class PostInputData:
    title: str
    content: str
    image_url: str


@strawberry.type
class Query:
    @strawberry.field
    async def login(self, info: Info, email: str, password: str) -> AuthData:
        token, user = await auth_service.login(
            email=email,
            password=password,
            settings=settings_from(info),
        )
        return AuthData(token=token, user_id=strawberry.ID(str(user["id"])))

    @strawberry.field
    async def posts(self, page: int = 1) -> PostData:
        rows, total = await post_service.list_posts(page=page)
        return PostData(posts=[Post.from_row(r) for r in rows], total_posts=total)

    @strawberry.field
    async def post(self, id: strawberry.ID) -> Post:
        row = await post_service.get_post(parse_id(id))
        return Post.from_row(row)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(self, user_input: UserInputData) -> User:
        row = await auth_service.register(
            email=user_input.email,
            name=user_input.name,
            password=user_input.password,
        )
        return User.from_row(row)

    @strawberry.mutation
    async def create_post(self, info: Info, post_input: PostInputData) -> Post:
        user_id = require_authenticated(auth_from(info))
        row = await post_service.create_post(
            user_id=user_id,
            title=post_input.title,
            content=post_input.content,
            image_url=post_input.image_url,
        )
        return Post.from_row(row)

    @strawberry.mutation
    async def delete_post(self, info: Info, id: strawberry.ID) -> bool:
        user_id = require_authenticated(auth_from(info))
        return await post_service.delete_post(
            user_id=user_id,
            post_id=parse_id(id),
            settings=settings_from(info),
        )
