from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra={"fields": {...}}`` is merged in."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data: Dict[str, Any] = {
            "level": record.levelname,
            "ts": int(time.time() * 1000),
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            data.update(fields)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def _resolve_level(default: int = logging.INFO) -> int:
    env_level = os.getenv("MEETSYNC_LOG_LEVEL")
    if not env_level:
        return default
    env_level = env_level.strip()
    if env_level.isdigit():
        return int(env_level)
    lvl = logging.getLevelName(env_level.upper())
    if isinstance(lvl, str):
        return default
    return int(lvl)


def setup_logging(level: int | None = None) -> None:
    resolved_level = level if level is not None else _resolve_level()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)
    # app.* loggers inherit from here
    logging.getLogger("app").setLevel(resolved_level)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request.state.request_id = uuid.uuid4().hex[:12]
        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        logging.getLogger("app.access").info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "fields": {
                    "request_id": request.state.request_id,
                    "status": response.status_code,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                }
            },
        )
        return response


def install_app_logging(app: FastAPI) -> None:
    app.add_middleware(RequestContextMiddleware)
