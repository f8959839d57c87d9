"""
Module 09D - API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from mmr_api.models.responses import ErrorResponse, ErrorDetail
from mmr_core.schemas.errors import ErrorCodes, MMRException


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


# Engine error code -> HTTP status; anything unlisted is a client error
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.PEAK_NOT_FOUND: 404,
    ErrorCodes.INVALID_PARENT: 500,
    ErrorCodes.NODE_OVERWRITE: 500,
    ErrorCodes.SNAPSHOT_INVALID: 500,
    ErrorCodes.UNKNOWN_HASHER: 500,
}


def status_for(exc: MMRException) -> int:
    return STATUS_BY_CODE.get(exc.code, 400)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def engine_error_handler(request: Request, exc: MMRException) -> JSONResponse:
    """Handle precondition failures raised by the engine."""
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
