# rentable/core/errors.py
"""
Application error taxonomy.

Every error is an HTTPException carrying a stable `kind`, so services can
raise them directly (as they raise HTTPException) and clients can switch on
`kind` instead of parsing messages. The handler registered in `main.py`
renders them as:

    {"kind": "Conflict", "detail": "Listing is not available"}
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class AppError(HTTPException):
    """Base class: an HTTP error with a stable machine-readable kind."""

    kind: str = "Error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class Unauthenticated(AppError):
    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AppError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInput(AppError):
    kind = "InvalidInput"
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(AppError):
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT


class InsufficientBalance(AppError):
    kind = "InsufficientBalance"
    status_code = status.HTTP_409_CONFLICT


class ExternalServiceError(AppError):
    kind = "ExternalServiceError"
    status_code = status.HTTP_502_BAD_GATEWAY


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )
