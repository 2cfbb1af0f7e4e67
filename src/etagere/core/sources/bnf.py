"""Bibliothèque nationale de France SRU source (Dublin Core XML)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

import httpx
import structlog

from ..config import Settings
from ..errors import MalformedResponse, NoData, ResolutionError
from ..models import Fingerprint, SourceRecord
from ..normalize import (
    collapse_whitespace,
    isbn_from_identifiers,
    language_label,
    strip_author_role,
)
from .base import Source

log = structlog.get_logger()

SRU_URL = "https://catalogue.bnf.fr/api/SRU"
DC_NS = "http://purl.org/dc/elements/1.1/"

# The catalogue indexes ISBN, EAN and other identifiers inconsistently,
# so the same fingerprint is tried against each index in turn.
QUERY_INDEXES = ("bib.isbn", "bib.ean", "bib.anywhere")


@dataclass(frozen=True)
class DublinCoreRecord:
    """One ``oai_dc:dc`` block. Every element holds all of its occurrences."""

    title: tuple[str, ...] = ()
    creator: tuple[str, ...] = ()
    publisher: tuple[str, ...] = ()
    date: tuple[str, ...] = ()
    language: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    identifier: tuple[str, ...] = ()

    @classmethod
    def from_element(cls, element: ET.Element) -> DublinCoreRecord:
        values: dict[str, list[str]] = {}
        for child in element.iter():
            if not child.tag.startswith(f"{{{DC_NS}}}"):
                continue
            text = (child.text or "").strip()
            if text:
                values.setdefault(child.tag[len(DC_NS) + 2 :], []).append(text)
        return cls(
            **{name: tuple(values.get(name, ())) for name in cls.__dataclass_fields__}
        )

    @property
    def empty(self) -> bool:
        return not any(getattr(self, name) for name in self.__dataclass_fields__)


def _first(values: tuple[str, ...]) -> str | None:
    return values[0] if values else None


def parse_records(xml: bytes | str) -> list[DublinCoreRecord]:
    """Parse an SRU searchRetrieve response into Dublin Core records."""
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        raise MalformedResponse(f"unparsable SRU response: {e}", source=BnfSource.name) from e

    records = []
    for element in root.iter():
        if element.tag.rsplit("}", 1)[-1] != "recordData":
            continue
        record = DublinCoreRecord.from_element(element)
        if not record.empty:
            records.append(record)
    return records


def pick_language(values: tuple[str, ...]) -> str | None:
    """Prefer a spelled-out language ("français") over its ISO code ("fre").

    The long form is capitalized to match the labels of the code table.
    """
    for value in values:
        if len(value) > 3:
            return value[:1].upper() + value[1:]
    return language_label(_first(values))


def to_source_record(record: DublinCoreRecord, isbn: Fingerprint) -> SourceRecord:
    return SourceRecord(
        source=BnfSource.name,
        isbn=isbn_from_identifiers(record.identifier) or isbn,
        title=collapse_whitespace(_first(record.title)),
        author=strip_author_role(_first(record.creator)),
        publisher=collapse_whitespace(_first(record.publisher)),
        publication_date=_first(record.date),
        language=pick_language(record.language),
        description="\n".join(record.description) or None,
    )


class BnfSource(Source):
    name = "bnf"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings, settings.bnf_timeout_ms)

    async def _search(
        self, client: httpx.AsyncClient, index: str, isbn: Fingerprint
    ) -> list[DublinCoreRecord]:
        params = {
            "version": "1.2",
            "operation": "searchRetrieve",
            "query": f'{index} all "{isbn}"',
            "recordSchema": "dublincore",
            "maximumRecords": "1",
        }
        resp = await self._get(client, SRU_URL, params=params)
        if not resp.is_success:
            raise NoData(f"SRU answered {resp.status_code}", source=self.name)
        return parse_records(resp.content)

    async def lookup(self, client: httpx.AsyncClient, isbn: Fingerprint) -> SourceRecord:
        answered = False
        last_error: ResolutionError | None = None
        for index in QUERY_INDEXES:
            try:
                records = await self._search(client, index, isbn)
            except ResolutionError as e:
                log.debug("bnf_query_failed", isbn=isbn, index=index, error=str(e))
                last_error = e
                continue
            answered = True
            if not records:
                log.debug("bnf_no_match", isbn=isbn, index=index)
                continue

            result = to_source_record(records[0], isbn)
            if not result.title:
                raise NoData("BnF record has no title", source=self.name)
            log.debug("bnf_hit", isbn=isbn, index=index, title=result.title)
            return result

        if last_error is not None and not answered:
            raise last_error
        raise NoData("no BnF record", source=self.name)
