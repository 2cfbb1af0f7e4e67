"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

VERSION = "0.1.0"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    google_books_key: str = ""
    target_language: str = "fr"
    contact_email: str = ""
    bnf_timeout_ms: int = 7500
    google_timeout_ms: int = 6500
    openlibrary_timeout_ms: int = 6500
    translate_timeout_ms: int = 10000
    translate_enabled: bool = True

    @property
    def user_agent(self) -> str:
        # Open Library grants identified clients a higher request rate.
        base = f"Etagere/{VERSION}"
        return f"{base} ({self.contact_email})" if self.contact_email else base

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            google_books_key=os.environ.get("GOOGLE_BOOKS_KEY", ""),
            target_language=os.environ.get("TARGET_LANGUAGE", "fr") or "fr",
            contact_email=os.environ.get("OL_CONTACT_EMAIL", ""),
            bnf_timeout_ms=_env_int("BNF_TIMEOUT_MS", 7500),
            google_timeout_ms=_env_int("GOOGLE_TIMEOUT_MS", 6500),
            openlibrary_timeout_ms=_env_int("OPENLIBRARY_TIMEOUT_MS", 6500),
            translate_timeout_ms=_env_int("TRANSLATE_TIMEOUT_MS", 10000),
            translate_enabled=_env_bool("TRANSLATE_ENABLED", True),
        )
