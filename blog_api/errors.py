"""
Error variants and the normalized envelope every client sees.

Two families reach the normalizers:
- `TransportError`: the request never made it to business logic
  (bad multipart body, unknown route, GraphQL syntax error, ...).
- `BusinessError`: raised deliberately by services/resolvers, optionally
  carrying an HTTP-ish status and a structured `data` payload.

Anything else is an unexpected failure and is reported as a generic 500.
"""

from __future__ import annotations

from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

DEFAULT_MESSAGE = "An error occurred"
DEFAULT_STATUS = 500


class AppError(Exception):
    default_status: int | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message or DEFAULT_MESSAGE)
        self.message = message
        self.status = status if status is not None else self.default_status
        self.data = data


class TransportError(AppError):
    pass


class BusinessError(AppError):
    pass


class AuthenticationError(BusinessError):
    default_status = 401

    def __init__(self, message: str = "Not Authenticated", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(BusinessError):
    default_status = 403


class NotFoundError(BusinessError):
    default_status = 404


class ValidationFailed(BusinessError):
    """
    Input rejected by validation; `data` is a list of {field, message}.
    """

    default_status = 422

    def __init__(self, message: str = "Invalid input.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ErrorEnvelope(BaseModel):
    message: str
    status: int
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message, "status": self.status}
        if self.data is not None:
            body["data"] = self.data
        return body


def field_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """
    Flatten pydantic/FastAPI error dicts into [{field, message}, ...].
    """
    out: list[dict[str, str]] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        out.append({"field": ".".join(loc), "message": str(err.get("msg", ""))})
    return out


def classify(exc: BaseException) -> AppError:
    """
    Map any exception onto one of the tagged variants.
    """
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, RequestValidationError):
        return TransportError("Invalid input.", status=422, data=field_errors(list(exc.errors())))
    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else None
        return TransportError(detail, status=exc.status_code)
    return TransportError(DEFAULT_MESSAGE, status=DEFAULT_STATUS)


def envelope_for(exc: BaseException) -> ErrorEnvelope:
    err = classify(exc)
    return ErrorEnvelope(
        message=err.message or DEFAULT_MESSAGE,
        status=err.status or DEFAULT_STATUS,
        data=err.data,
    )


def validate_input(model: type[BaseModel], **values: Any) -> Any:
    """
    Build `model` from raw resolver arguments, raising ValidationFailed.
    """
    try:
        return model(**values)
    except ValidationError as exc:
        raise ValidationFailed(data=field_errors(list(exc.errors()))) from exc
