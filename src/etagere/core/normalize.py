"""Field normalizers shared by the sources and the resolver."""

from __future__ import annotations

import re
from types import MappingProxyType

from bs4 import BeautifulSoup

from .errors import InvalidIsbn
from .models import Fingerprint

# ISO 639-1 and 639-2 (bibliographic and terminologic) codes -> display label.
LANGUAGE_LABELS = MappingProxyType(
    {
        "en": "English",
        "eng": "English",
        "fr": "Français",
        "fre": "Français",
        "fra": "Français",
        "es": "Español",
        "spa": "Español",
        "de": "Deutsch",
        "ger": "Deutsch",
        "deu": "Deutsch",
        "it": "Italiano",
        "ita": "Italiano",
        "pt": "Português",
        "por": "Português",
        "nl": "Nederlands",
        "dut": "Nederlands",
        "nld": "Nederlands",
        "ru": "Русский",
        "rus": "Русский",
        "ja": "日本語",
        "jpn": "日本語",
        "zh": "中文",
        "chi": "中文",
        "zho": "中文",
        "la": "Latina",
        "lat": "Latina",
    }
)

_NOT_ISBN_CHARS = re.compile(r"[^0-9Xx]")
_ISBN13_RUN = re.compile(r"97[89](?:[\s-]*\d){10}")
_WHITESPACE = re.compile(r"\s+")

_ROLE_WORDS = (
    "auteur du texte",
    "auteur de l'argument",
    "auteur",
    "autrice",
    "traducteur",
    "traductrice",
    "préfacier",
    "préfacière",
    "postfacier",
    "illustrateur",
    "illustratrice",
    "éditeur scientifique",
    "éditrice scientifique",
    "directeur de publication",
    "adaptateur",
    "author",
    "translator",
    "editor",
    "illustrator",
)
_TRAILING_ROLE = re.compile(
    r"\s+(?:" + "|".join(re.escape(w) for w in _ROLE_WORDS) + r")\s*\.?\s*$",
    re.IGNORECASE,
)
# "(1948-..)", "(1900-1944)." and friends
_TRAILING_DATES = re.compile(r"\s*\([^()]*\d[^()]*\)\s*\.?\s*$")


def clean_isbn(raw: str | None) -> Fingerprint:
    """Reduce scanner or keyboard input to an ISBN fingerprint.

    Everything but digits and X is dropped, X is upper-cased and the
    result is cut to 13 characters. Raises InvalidIsbn when nothing is left.
    """
    cleaned = _NOT_ISBN_CHARS.sub("", raw or "").upper()[:13]
    if not cleaned:
        raise InvalidIsbn("missing isbn")
    return Fingerprint(cleaned)


def collapse_whitespace(value: str | None) -> str | None:
    if value is None:
        return None
    return _WHITESPACE.sub(" ", value).strip() or None


def language_label(code: str | None) -> str | None:
    """Map a short language code to its label; unknown values pass through."""
    if not code:
        return None
    code = code.strip()
    return LANGUAGE_LABELS.get(code.lower(), code) or None


def strip_author_role(name: str | None) -> str | None:
    """Drop trailing role words and life-date parentheticals from a creator.

    >>> strip_author_role("Martin, George R.R. Illustrateur (1948-..).")
    'Martin, George R.R.'
    """
    if not name:
        return None
    previous = None
    current = name.strip()
    while current != previous:
        previous = current
        current = _TRAILING_DATES.sub("", current)
        current = _TRAILING_ROLE.sub("", current)
        current = current.rstrip(" ,;")
    return current or None


def isbn_from_identifiers(identifiers: tuple[str, ...] | list[str]) -> str | None:
    """Return the first 978/979 ISBN-13 found in a list of identifier strings."""
    for identifier in identifiers:
        match = _ISBN13_RUN.search(identifier)
        if match:
            return _NOT_ISBN_CHARS.sub("", match.group(0)).upper()
    return None


def scrape_description(html: str) -> str | None:
    """Extract the first paragraph of an Open Library ``read-more`` block."""
    soup = BeautifulSoup(html, "html.parser")
    paragraph = soup.select_one(".read-more__content p")
    if paragraph is None:
        return None
    for br in paragraph.find_all("br"):
        br.replace_with("\n")
    return paragraph.get_text().strip() or None
