from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import Settings
from ..errors import RemoteFetchError
from ..models.meeting import Category

_categories = TypeAdapter(List[Category])


class RemoteClient:
    """Async client for the meetings API.

    Every failure (network, HTTP status, unexpected body) surfaces as
    :class:`RemoteFetchError`; callers decide how to degrade.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"User-Agent": "meetsync/0.1 httpx"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.logger = logging.getLogger("app.remote")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RemoteClient":
        return cls(settings.api_base_url, token=settings.api_token, timeout=settings.request_timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_data(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise RemoteFetchError(f"HTTP {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"request to {url} failed: {e}") from e
        except ValueError as e:
            raise RemoteFetchError(f"invalid JSON from {url}") from e
        if not isinstance(body, dict) or "data" not in body:
            raise RemoteFetchError(f"unexpected body from {url}")
        return body["data"] or []

    async def _get_categories(self, url: str, limit: int) -> List[Category]:
        data = await self._get_data(url, {"num_meetings": limit})
        try:
            return _categories.validate_python(data)
        except ValidationError as e:
            raise RemoteFetchError(f"malformed categories from {url}: {e.error_count()} error(s)") from e

    async def fetch_categorized_meetings(self, limit: int = 100) -> List[Category]:
        return await self._get_categories("/categories-with-meetings/", limit)

    async def fetch_uncategorized_meetings(self, limit: int = 100) -> List[Category]:
        return await self._get_categories("/uncategorized-meetings/", limit)

    async def fetch_user_recordings(self, user_id: str) -> List[Dict[str, Any]]:
        data = await self._get_data("/recordings/", {"user_id": user_id})
        if not isinstance(data, list):
            raise RemoteFetchError("unexpected recordings payload")
        rows = [r for r in data if isinstance(r, dict)]
        if len(rows) != len(data):
            self.logger.warning(f"skipped {len(data) - len(rows)} non-object recording(s)")
        return rows
