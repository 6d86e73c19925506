from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from .models import EXTERNAL_ID_PREFIX, TodoRecord
from .schemas import RemoteTodo
from .settings import Settings

logger = logging.getLogger(__name__)

_REMOTE_LIST = TypeAdapter(List[RemoteTodo])


class SeedFetchError(Exception):
    """Raised when the remote seed list cannot be retrieved."""


# PUBLIC_INTERFACE
class SeedSource(ABC):
    """Source of the remote todo list merged into local storage on first load."""

    @abstractmethod
    def fetch(self) -> List[RemoteTodo]:
        """Return the remote todos. Raise SeedFetchError on any failure."""


class HttpSeedSource(SeedSource):
    """
    Fetch the seed list from a JSON endpoint with a limit query.

    `transport` is handed to httpx as-is, which lets tests plug in
    httpx.MockTransport.
    """

    def __init__(
        self,
        url: str,
        limit: int = 10,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.limit = limit
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpSeedSource":
        return cls(settings.seed_url, limit=settings.seed_limit, timeout=settings.seed_timeout_seconds)

    def fetch(self) -> List[RemoteTodo]:
        logger.info("Fetching %d seed todos from %s", self.limit, self.url)
        try:
            with httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport) as client:
                response = client.get(self.url, params={"_limit": self.limit})
        except httpx.HTTPError as exc:
            raise SeedFetchError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise SeedFetchError(f"Network response was not ok (HTTP {response.status_code})")

        try:
            return _REMOTE_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise SeedFetchError("Seed response is not a valid todo list") from exc


def to_todo(remote: RemoteTodo) -> TodoRecord:
    """Map a remote todo into a record with a namespaced id."""
    return {
        "id": f"{EXTERNAL_ID_PREFIX}{remote.id}",
        "title": remote.title,
        "completed": remote.completed,
    }
