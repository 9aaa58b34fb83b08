from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class MeetsyncError(Exception):
    """Base class for failures raised by the I/O collaborators."""


class RemoteFetchError(MeetsyncError):
    """The meetings API could not be reached or answered with garbage."""


class CacheError(MeetsyncError):
    """Reading from or writing to the local recording cache failed."""


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException):  # type: ignore[unused-variable]
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(CacheError)
    async def _handle_cache_error(request: Request, exc: CacheError):  # type: ignore[unused-variable]
        logging.getLogger("app").warning(f"cache error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=ErrorResponse(error="fetch failed").model_dump())

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):  # type: ignore[unused-variable]
        logging.getLogger("app").exception("Unhandled exception")
        return JSONResponse(status_code=500, content=ErrorResponse(error="internal error").model_dump())
