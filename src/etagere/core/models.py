"""Data models for resolved book metadata."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import NewType

# Sanitized ISBN: digits and "X" only, at most 13 characters.
Fingerprint = NewType("Fingerprint", str)

# Fields every source may supply, in payload order.
FIELDS = (
    "title",
    "author",
    "publisher",
    "publication_date",
    "language",
    "description",
    "cover_url",
)

# A resolution stops querying sources once these are filled.
REQUIRED_FIELDS = ("title", "author")

MERGED_SOURCE = "merged"


@dataclass(frozen=True)
class SourceRecord:
    """What one source said about an ISBN. ``None`` means it said nothing."""

    source: str
    isbn: str
    title: str | None = None
    author: str | None = None
    publisher: str | None = None
    publication_date: str | None = None
    language: str | None = None
    description: str | None = None
    cover_url: str | None = None

    def __post_init__(self) -> None:
        # Blank or non-text values carry no information; store them as absent.
        for name in FIELDS:
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                object.__setattr__(self, name, None)


@dataclass(frozen=True)
class MergedRecord:
    isbn: Fingerprint
    source: str
    title: str
    author: str | None = None
    publisher: str | None = None
    publication_date: str | None = None
    language: str | None = None
    description: str | None = None
    cover_url: str | None = None
    contributors: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        """Render the JSON success payload served to the UI layer."""
        payload = asdict(self)
        payload.pop("contributors")
        return {"source": payload.pop("source"), **payload}
