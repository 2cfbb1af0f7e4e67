"""Best-effort translation of descriptions into the reader's language."""

from __future__ import annotations

import httpx
import structlog

from .config import Settings

log = structlog.get_logger()

TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
MIN_TRANSLATABLE_LENGTH = 3


def _joined_segments(data: object) -> str:
    """``[[["Bonjour", "Hello", ...], ...], ...]`` -> ``"Bonjour..."``."""
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return ""
    parts = []
    for segment in data[0]:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])
    return "".join(parts)


async def translate_description(
    client: httpx.AsyncClient,
    text: str | None,
    target: str,
    settings: Settings | None = None,
) -> str | None:
    """Translate ``text`` into ``target``, or return it unchanged on any failure.

    The upstream language is not checked: detection from catalog metadata is
    unreliable, so text already in the target language is sent as well.
    """
    if not text or len(text.strip()) < MIN_TRANSLATABLE_LENGTH:
        return text

    settings = settings or Settings()
    params = {"client": "gtx", "sl": "auto", "tl": target, "dt": "t", "q": text}
    try:
        resp = await client.get(
            TRANSLATE_URL,
            params=params,
            headers={"User-Agent": settings.user_agent},
            timeout=settings.translate_timeout_ms / 1000,
        )
        if not resp.is_success:
            log.debug("translate_status", status=resp.status_code, target=target)
            return text
        translated = _joined_segments(resp.json())
    except (httpx.HTTPError, ValueError) as e:
        log.debug("translate_error", target=target, error=str(e))
        return text

    return translated.strip() or text
