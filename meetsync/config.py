from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings.

    Values may be provided via environment variables (``MEETSYNC_*``). This
    keeps the remote endpoint and the cache location out of the code.
    """

    # HTTP
    cors_allow_origins: str = Field("*", description="Comma-separated origins")

    # Remote meetings API
    api_base_url: str = Field("http://localhost:8000/api", description="Base URL of the meetings API")
    api_token: Optional[str] = Field(None, description="Bearer token sent to the meetings API")
    request_timeout_s: float = 20.0

    # Listing
    num_meetings: int = Field(100, description="Page size requested from the list endpoints")
    recent_limit: int = 10
    dedupe_meetings: bool = Field(False, description="Collapse meetings sharing an event_id after merge")

    # Local cache
    db_path: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "meetsync.db",
        description="SQLite file holding synced recordings",
    )

    class Config:
        env_prefix = "MEETSYNC_"
        case_sensitive = False


def load_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
