"""
Error Taxonomy and Global Error Handling

This module defines the exceptions raised by the retrieval pipeline and the
application-wide exception handlers that turn them into HTTP responses.

Taxonomy
--------
- StoreQueryError    : any failure reading or writing the record store
- RerankServiceError : transport/HTTP failure talking to the reasoning service

Malformed reasoning-service output and empty result sets are NOT errors; the
pipeline handles both with a defined fallback and never raises for them.

Design Goals
------------
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("design_assistant.errors")


# ---------------------------------------------------------------------
# Pipeline Exceptions
# ---------------------------------------------------------------------

class SearchError(RuntimeError):
    """Base class for infrastructure failures surfaced by a search."""


class StoreQueryError(SearchError):
    """Raised when a record-store query fails."""


class RerankServiceError(SearchError):
    """Raised when the reasoning service cannot be reached or rejects a call."""


SEARCH_FAILED_MESSAGE = "Something went wrong while searching. Please try again."


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def search_error_handler(
    request: Request,
    exc: SearchError,
) -> JSONResponse:
    """
    Map pipeline infrastructure failures to a 502 response.

    The caller (typically the chat bot) relays `detail` to the user and may
    retry the whole request.
    """
    logger.exception(
        "Search failed (%s) during request: %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "search_failed",
        "detail": SEARCH_FAILED_MESSAGE,
    }

    return JSONResponse(
        status_code=502,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    This handler should be registered with FastAPI as the final safety net
    for any exception not otherwise handled by route-level or framework-level
    handlers.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
