"""Shared plumbing for metadata sources."""

from __future__ import annotations

import httpx
import structlog

from ..config import Settings
from ..errors import MalformedResponse, SourceTimeout, TransportFailure
from ..models import Fingerprint, SourceRecord
from ..timeouts import bounded

log = structlog.get_logger()


class Source:
    """One external catalog. Subclasses implement :meth:`lookup`.

    ``lookup`` returns a SourceRecord or raises NoData, MalformedResponse,
    SourceTimeout or TransportFailure. Sources hold configuration only,
    never per-request state.
    """

    name = ""

    def __init__(self, settings: Settings, timeout_ms: int) -> None:
        self.settings = settings
        self.timeout_ms = timeout_ms

    async def lookup(self, client: httpx.AsyncClient, isbn: Fingerprint) -> SourceRecord:
        raise NotImplementedError

    async def _get(
        self, client: httpx.AsyncClient, url: str, **kwargs: object
    ) -> httpx.Response:
        """Deadline-bounded GET carrying the identifying User-Agent."""
        headers = dict(kwargs.pop("headers", None) or {})  # type: ignore[call-overload]
        headers.setdefault("User-Agent", self.settings.user_agent)
        kwargs.setdefault("follow_redirects", True)
        # The per-request timeout must not be shorter than the source deadline.
        kwargs.setdefault("timeout", self.timeout_ms / 1000)
        try:
            return await bounded(
                client.get(url, headers=headers, **kwargs),  # type: ignore[arg-type]
                self.timeout_ms,
                source=self.name,
            )
        except httpx.TimeoutException as e:
            raise SourceTimeout(str(e) or "timed out", source=self.name) from e
        except httpx.HTTPError as e:
            raise TransportFailure(str(e) or type(e).__name__, source=self.name) from e

    async def _get_json(self, client: httpx.AsyncClient, url: str, **kwargs: object) -> object:
        """GET and decode JSON. Returns None for non-2xx answers."""
        resp = await self._get(client, url, **kwargs)
        if not resp.is_success:
            log.warning("source_status", source=self.name, url=url, status=resp.status_code)
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponse(f"invalid JSON from {url}", source=self.name) from e
