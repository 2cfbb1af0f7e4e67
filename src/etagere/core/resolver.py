"""Resolve an ISBN into one merged metadata record.

Sources are queried one after another in priority order:
BnF (SRU) -> Google Books -> Open Library.

Each output field takes the first non-empty value among the sources that
were actually queried. Querying stops as soon as title and author are
both known, so lower-priority sources are only hit to fill gaps.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import httpx
import structlog

from .config import Settings
from .enrich import translate_description
from .errors import RECOVERABLE, NotFound
from .models import (
    FIELDS,
    MERGED_SOURCE,
    REQUIRED_FIELDS,
    Fingerprint,
    MergedRecord,
    SourceRecord,
)
from .normalize import clean_isbn, language_label
from .sources.base import Source
from .sources.bnf import BnfSource
from .sources.google_books import GoogleBooksSource
from .sources.open_library import OpenLibrarySource

log = structlog.get_logger()


def default_sources(settings: Settings, language: str | None = None) -> list[Source]:
    return [
        BnfSource(settings),
        GoogleBooksSource(settings, language=language),
        OpenLibrarySource(settings),
    ]


def _filled(records: Sequence[SourceRecord], name: str) -> bool:
    return any(getattr(r, name) for r in records)


def merge_records(isbn: Fingerprint, records: Sequence[SourceRecord]) -> MergedRecord:
    """Field-level merge of source records, given in priority order.

    Raises NotFound when no record carries a title.
    """
    values: dict[str, str | None] = {}
    contributors: list[str] = []
    for name in FIELDS:
        values[name] = None
        for record in records:
            value = getattr(record, name)
            if value:
                values[name] = value
                if record.source not in contributors:
                    contributors.append(record.source)
                break

    title = values.pop("title")
    if not title:
        raise NotFound(f"no title found for {isbn}")

    # Order contributors by source priority, not by field order.
    priority = [r.source for r in records]
    contributors.sort(key=priority.index)
    winner = next(r for r in records if r.source == contributors[0])
    values["language"] = language_label(values["language"])

    return MergedRecord(
        isbn=Fingerprint(winner.isbn or isbn),
        source=contributors[0] if len(contributors) == 1 else MERGED_SOURCE,
        title=title,
        contributors=tuple(contributors),
        **values,
    )


async def _collect(
    client: httpx.AsyncClient, isbn: Fingerprint, sources: Sequence[Source]
) -> list[SourceRecord]:
    records: list[SourceRecord] = []
    for source in sources:
        if records and all(_filled(records, name) for name in REQUIRED_FIELDS):
            log.debug("resolution_short_circuit", isbn=isbn, skipped=source.name)
            break
        try:
            record = await source.lookup(client, isbn)
        except RECOVERABLE as e:
            log.info("source_skipped", isbn=isbn, source=source.name, reason=type(e).__name__, error=str(e))
            continue
        records.append(record)
    return records


async def resolve_isbn(
    raw_isbn: str,
    target_language: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    sources: Sequence[Source] | None = None,
    translate: bool | None = None,
) -> MergedRecord:
    """Resolve ``raw_isbn`` into a MergedRecord.

    Raises InvalidIsbn before any network call when the input holds no ISBN
    characters, and NotFound when no source yields a title.
    """
    isbn = clean_isbn(raw_isbn)
    settings = settings or Settings.from_env()
    language = target_language or settings.target_language
    if sources is None:
        sources = default_sources(settings, language)
    if translate is None:
        translate = settings.translate_enabled

    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await _resolve(own_client, isbn, language, settings, sources, translate)
    return await _resolve(client, isbn, language, settings, sources, translate)


async def _resolve(
    client: httpx.AsyncClient,
    isbn: Fingerprint,
    language: str,
    settings: Settings,
    sources: Sequence[Source],
    translate: bool,
) -> MergedRecord:
    records = await _collect(client, isbn, sources)
    try:
        merged = merge_records(isbn, records)
    except NotFound:
        log.info("resolution_not_found", isbn=isbn, tried=[s.name for s in sources])
        raise

    if translate and merged.description:
        description = await translate_description(client, merged.description, language, settings)
        merged = replace(merged, description=description)

    log.info(
        "resolution_complete",
        isbn=isbn,
        source=merged.source,
        contributors=list(merged.contributors),
        title=merged.title,
    )
    return merged
