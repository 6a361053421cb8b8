"""
Custom exception hierarchy for the journal analyzer.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AnalyzerException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NoEntriesError(AnalyzerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "NO_ENTRIES"

    def __init__(self, start: str | None = None, end: str | None = None):
        details: dict[str, Any] = {}
        if start and end:
            details = {"start": start, "end": end}
        super().__init__(
            message="No journal entries found for the selected date range.",
            details=details,
        )


class TooManyEntriesError(AnalyzerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "TOO_MANY_ENTRIES"

    def __init__(self, max_entries: int, received: int):
        super().__init__(
            message=f"Request exceeds maximum of {max_entries} entries. Received {received}.",
            details={"max_entries": max_entries, "received": received},
        )


class InvalidPreferencesError(AnalyzerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_PREFERENCES"

    def __init__(self, message: str):
        super().__init__(message=message)


class PresetNotFoundError(AnalyzerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PRESET_NOT_FOUND"

    def __init__(self, name: str, available: list[str]):
        super().__init__(
            message=f"Unknown preset '{name}'.",
            details={"name": name, "available": available},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def analyzer_exception_handler(request: Request, exc: AnalyzerException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
