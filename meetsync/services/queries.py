from __future__ import annotations

import logging
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from ..errors import MeetsyncError

T = TypeVar("T")

IDLE = "idle"
LOADING = "loading"
ERROR = "error"
SUCCESS = "success"


class MeetingQuery(Generic[T]):
    """A named remote fetch with loading/error/success state.

    ``run`` never raises for collaborator failures: the error is kept on the
    query and ``data_or_empty`` keeps handing out an empty list, so merge code
    only ever sees collections.
    """

    def __init__(self, name: str, fetch: Callable[[], Awaitable[List[T]]]) -> None:
        self.name = name
        self._fetch = fetch
        self.status: str = IDLE
        self.data: Optional[List[T]] = None
        self.error: Optional[str] = None
        self.runs = 0
        self.logger = logging.getLogger("app.listing")

    @property
    def is_error(self) -> bool:
        return self.status == ERROR

    @property
    def settled(self) -> bool:
        return self.status in (ERROR, SUCCESS)

    def data_or_empty(self) -> List[T]:
        return list(self.data or [])

    async def run(self) -> None:
        self.status = LOADING
        self.runs += 1
        try:
            self.data = await self._fetch()
        except MeetsyncError as e:
            self.logger.warning(f"query {self.name} failed: {e}")
            self.status = ERROR
            self.data = None
            self.error = str(e)
            return
        self.status = SUCCESS
        self.error = None
