"""Error Handlers — map engine failures onto the stats API's JSON error envelope.

Invariants:
    - NtrlStatsError → its own http_status + to_response() envelope; the story
      and range it concerns are logged as structured extras
    - Caller mistakes (4xx) log at warning; engine failures log at their severity
    - RequestValidationError → 400 with one detail per offending field
    - Anything else → 500 INTERNAL_ERROR, no internal details in the body
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ntrl_stats.core.errors import ErrorSeverity, NtrlStatsError

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NtrlStatsError, stats_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


def _log_level(exc: NtrlStatsError) -> int:
    if exc.http_status < 500:
        return logging.WARNING
    return _SEVERITY_LEVELS.get(exc.severity, logging.ERROR)


async def stats_error_handler(request: Request, exc: NtrlStatsError) -> JSONResponse:
    logger.log(
        _log_level(exc),
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "story_id": exc.context.story_id,
            "range": exc.context.stats_range,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": "validation",
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
