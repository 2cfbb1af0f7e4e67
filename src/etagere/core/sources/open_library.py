"""Open Library source: edition record plus author and work lookups."""

from __future__ import annotations

import httpx
import structlog

from ..config import Settings
from ..errors import MalformedResponse, NoData, ResolutionError
from ..models import Fingerprint, SourceRecord
from ..normalize import scrape_description
from .base import Source

log = structlog.get_logger()

OL_BASE = "https://openlibrary.org"
COVER_BY_ID = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
COVER_BY_ISBN = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg"


def description_text(value: object) -> str | None:
    """Normalize a description given either as text or as ``{"value": text}``."""
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, str):
        return value.strip() or None
    return None


def _first_key(entries: object) -> str | None:
    """``[{"key": "/authors/OL1A"}, ...]`` -> ``"/authors/OL1A"``."""
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        key = entries[0].get("key")
        return key if isinstance(key, str) and key else None
    return None


def cover_url(edition: dict, isbn: str) -> str:
    """Cover by explicit id, else derived from the ISBN (may 404 upstream)."""
    covers = [c for c in edition.get("covers") or [] if isinstance(c, int) and c > 0]
    if covers:
        return COVER_BY_ID.format(cover_id=covers[0])
    return COVER_BY_ISBN.format(isbn=isbn)


def publisher_of(edition: dict) -> str | None:
    publishers = edition.get("publishers")
    if isinstance(publishers, list) and publishers:
        first = publishers[0]
        return first.get("name") if isinstance(first, dict) else first
    return edition.get("publisher")


class OpenLibrarySource(Source):
    name = "openlibrary"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings, settings.openlibrary_timeout_ms)

    async def fetch_author_name(self, client: httpx.AsyncClient, key: str) -> str | None:
        try:
            data = await self._get_json(client, f"{OL_BASE}{key}.json")
        except ResolutionError as e:
            log.debug("openlibrary_author_error", key=key, error=str(e))
            return None
        if not isinstance(data, dict):
            return None
        return data.get("name") or data.get("personal_name")

    async def fetch_work_description(self, client: httpx.AsyncClient, key: str) -> str | None:
        try:
            data = await self._get_json(client, f"{OL_BASE}{key}.json")
        except ResolutionError as e:
            log.debug("openlibrary_work_error", key=key, error=str(e))
            return None
        if not isinstance(data, dict):
            return None
        return description_text(data.get("description"))

    async def fetch_page_description(self, client: httpx.AsyncClient, isbn: str) -> str | None:
        """Last resort: the description block on the edition's HTML page."""
        try:
            resp = await self._get(client, f"{OL_BASE}/isbn/{isbn}")
        except ResolutionError as e:
            log.debug("openlibrary_page_error", isbn=isbn, error=str(e))
            return None
        if not resp.is_success:
            return None
        return scrape_description(resp.text)

    async def lookup(self, client: httpx.AsyncClient, isbn: Fingerprint) -> SourceRecord:
        edition = await self._get_json(client, f"{OL_BASE}/isbn/{isbn}.json")
        if edition is None:
            raise NoData("no Open Library edition", source=self.name)
        if not isinstance(edition, dict):
            raise MalformedResponse("edition is not an object", source=self.name)

        author = None
        author_key = _first_key(edition.get("authors"))
        if author_key:
            author = await self.fetch_author_name(client, author_key)

        description = description_text(edition.get("description"))
        work_key = _first_key(edition.get("works"))
        if not description and work_key:
            description = await self.fetch_work_description(client, work_key)
        if not description:
            description = await self.fetch_page_description(client, isbn)

        language_key = _first_key(edition.get("languages"))
        log.debug(
            "openlibrary_hit",
            isbn=isbn,
            title=edition.get("title"),
            has_author=bool(author),
            has_desc=bool(description),
        )
        return SourceRecord(
            source=self.name,
            isbn=isbn,
            title=edition.get("title"),
            author=author,
            publisher=publisher_of(edition),
            publication_date=edition.get("publish_date"),
            language=language_key.rsplit("/", 1)[-1] if language_key else None,
            description=description,
            cover_url=cover_url(edition, isbn),
        )
