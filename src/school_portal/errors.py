"""
school_portal.errors

Domain exception hierarchy.

Responsibilities:
- Carry an HTTP status, a human message and optional structured details.
- Let services raise failures without knowing about HTTP responses; the API layer
  translates them into the standard response envelope.
"""

from __future__ import annotations

from typing import Any

from starlette import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred while processing the request."

    def __init__(self, message: str | None = None, *, errors: Any = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request."


class PayloadValidationError(BadRequestError):
    """
    Field-level validation failure raised outside pydantic (uploads, path categories,
    password policy). `errors` is a list of `{"path": ..., "message": ...}` items.
    """

    default_message = "Validation error occurred."

    def __init__(self, errors: list[dict[str, str]]) -> None:
        super().__init__(errors=errors)


class CryptoError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Bad encrypted data."


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Authorization failed. User is not authorized to perform this action."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Entry already exists."


class UnsupportedContentTypeError(AppError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, content_type: str) -> None:
        super().__init__(
            f"Unsupported Content-Type: {content_type}", errors={"contentType": content_type}
        )
        self.content_type = content_type


# --- Module Notes -----------------------------------------------------------
# Exception handlers live in `school_portal.api.errors`.
