# pawmart/core/errors.py
"""
API error taxonomy.

Every error carries a stable machine-readable `code` (sent as `message`)
next to a human readable `detail`. Handlers raise these directly; the
exception handlers in `pawmart.main` render them.
"""
from typing import Dict, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_detail: str = "Internal server error."

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )

    def to_body(self) -> dict:
        return {"message": self.code, "detail": self.detail}


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Unauthorized access."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "You do not have permission to perform this action."


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Resource not found."


class InvalidInput(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    default_detail = "Invalid input."


class Internal(ApiError):
    pass


class Unavailable(ApiError):
    """Upstream (store or identity provider) timed out or is down; safe to retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "unavailable"
    default_detail = "Service temporarily unavailable, please retry."
