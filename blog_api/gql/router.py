"""
GraphQL dispatcher and its error normalizer.

Every GraphQL error goes through `format_error`:
- no wrapped exception (syntax/validation errors): passed through as-is;
- a wrapped BusinessError: reshaped into {message, status, data};
- any other wrapped exception: a generic 500 envelope.

Requests strawberry rejects before execution are re-raised as
TransportError and answered by the fallback handlers.
"""

from __future__ import annotations

import logging
from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.http.exceptions import HTTPException as GraphQLHTTPException
from strawberry.types import ExecutionResult

from blog_api.core.config import Settings
from blog_api.errors import BusinessError, TransportError, envelope_for

from .context import get_context
from .schema import Mutation, Query

logger = logging.getLogger(__name__)


def _wrapped(error: GraphQLError) -> BaseException | None:
    original = error.original_error
    if original is None or isinstance(original, GraphQLError):
        return None
    return original


def format_error(error: GraphQLError) -> dict[str, Any]:
    original = _wrapped(error)
    if original is None:
        return error.formatted
    return envelope_for(original).to_dict()


class BlogSchema(strawberry.Schema):
    def process_errors(self, errors: list[GraphQLError], execution_context: Any = None) -> None:
        for error in errors:
            original = _wrapped(error)
            if original is None:
                logger.info("graphql_request_error message=%s", error.message)
            elif isinstance(original, BusinessError):
                logger.info(
                    "graphql_business_error path=%s status=%s message=%s",
                    error.path,
                    original.status,
                    original.message,
                )
            else:
                logger.error(
                    "graphql_resolver_failed path=%s",
                    error.path,
                    exc_info=(type(original), original, original.__traceback__),
                )


class BlogGraphQLRouter(GraphQLRouter):
    async def run(self, *args: Any, **kwargs: Any) -> Any:
        # Rejections raised before execution (bad body, GET mutation, ...)
        # would otherwise be answered as plain text.
        try:
            return await super().run(*args, **kwargs)
        except GraphQLHTTPException as exc:
            logger.info("graphql_request_rejected status=%s reason=%s", exc.status_code, exc.reason)
            raise TransportError(exc.reason, status=exc.status_code) from exc

    async def process_result(self, request: Request, result: ExecutionResult) -> GraphQLHTTPResponse:
        response: GraphQLHTTPResponse = {"data": result.data}
        if result.errors:
            response["errors"] = [format_error(err) for err in result.errors]
        if result.extensions:
            response["extensions"] = result.extensions
        return response


schema = BlogSchema(query=Query, mutation=Mutation)


def build_router(settings: Settings) -> BlogGraphQLRouter:
    return BlogGraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.graphiql else None,
    )
