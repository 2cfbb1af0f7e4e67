"""Google Books volumes source."""

from __future__ import annotations

import httpx
import structlog

from ..config import Settings
from ..errors import MalformedResponse, NoData
from ..models import Fingerprint, SourceRecord
from .base import Source

log = structlog.get_logger()

VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


class GoogleBooksSource(Source):
    name = "google"

    def __init__(self, settings: Settings, language: str | None = None) -> None:
        super().__init__(settings, settings.google_timeout_ms)
        self.language = language or settings.target_language

    def _params(self, isbn: Fingerprint) -> dict[str, str]:
        params = {"q": f"isbn:{isbn}", "printType": "books"}
        if self.language:
            params["langRestrict"] = self.language
        if self.settings.google_books_key:
            params["key"] = self.settings.google_books_key
        return params

    async def lookup(self, client: httpx.AsyncClient, isbn: Fingerprint) -> SourceRecord:
        data = await self._get_json(client, VOLUMES_URL, params=self._params(isbn))
        if data is None:
            raise NoData("Google Books request failed", source=self.name)
        if not isinstance(data, dict):
            raise MalformedResponse("volumes response is not an object", source=self.name)

        items = data.get("items")
        items = items if isinstance(items, list) else []
        volume = items[0].get("volumeInfo") if items and isinstance(items[0], dict) else None
        if not isinstance(volume, dict):
            log.debug("google_no_match", isbn=isbn)
            raise NoData("no Google Books volume", source=self.name)

        authors = volume.get("authors")
        authors = authors if isinstance(authors, list) else []
        images = volume.get("imageLinks")
        images = images if isinstance(images, dict) else {}
        cover = images.get("thumbnail") or images.get("smallThumbnail")
        if isinstance(cover, str) and cover.startswith("http:"):
            cover = "https:" + cover[len("http:") :]

        log.debug("google_hit", isbn=isbn, title=volume.get("title"))
        return SourceRecord(
            source=self.name,
            isbn=isbn,
            title=volume.get("title"),
            author=authors[0] if authors and isinstance(authors[0], str) else None,
            publisher=volume.get("publisher"),
            publication_date=volume.get("publishedDate"),
            language=volume.get("language"),
            description=volume.get("description"),
            cover_url=cover,
        )
