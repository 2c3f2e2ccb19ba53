"""
Permissive CORS headers and preflight short-circuit.
"""

from __future__ import annotations

from fastapi import Request, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def apply_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


async def cors_filter(request: Request, call_next):
    if request.method == "OPTIONS":
        # GraphQL only speaks GET and POST; browsers still preflight everything.
        return apply_cors_headers(Response(status_code=200))
    response = await call_next(request)
    return apply_cors_headers(response)
