from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .db import RecordingStore
from .errors import install_error_handlers
from .logging import install_app_logging, setup_logging
from .routers.recordings import router as recordings_router
from .services.remote import RemoteClient
from .state import State


def _load_env_file(env_path: Path) -> None:
    """Minimal .env loader: KEY=VALUE lines into os.environ if not set.
    - Ignores comments and blank lines
    - Strips surrounding quotes
    - Supports optional 'export ' prefix
    """
    if not env_path.exists():
        return
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.lower().startswith("export "):
            line = line[7:].lstrip()
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        key = k.strip()
        val = v.strip().strip('"').strip("'")
        os.environ.setdefault(key, val)


def create_app(
    settings: Optional[Settings] = None,
    remote: Optional[RemoteClient] = None,
) -> FastAPI:
    if settings is None:
        # Optional .env at the project root
        _load_env_file(Path(__file__).resolve().parent.parent / ".env")
        settings = load_settings()
    setup_logging()

    app = FastAPI(title="Meeting Recordings Sync", version="0.1.0")

    # Attach config/state
    app.state.settings = settings
    store = RecordingStore(settings.db_path)
    # Ensure the cache schema exists before handling requests
    store.initialize()
    if remote is None:
        remote = RemoteClient.from_settings(settings)
    app.state.state = State.build(settings, store, remote)

    @app.on_event("shutdown")
    async def _close_remote() -> None:  # pragma: no cover - exercised by servers only
        await remote.aclose()

    # CORS
    allow = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_app_logging(app)
    install_error_handlers(app)

    # Versioned API
    app.include_router(recordings_router, prefix="/v1")

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return {"status": "ok"}

    logging.getLogger("app").info(f"cache at {store.db_path}, remote {settings.api_base_url}")
    return app
