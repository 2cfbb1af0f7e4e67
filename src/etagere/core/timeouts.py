"""Deadline wrapper shared by every outbound source call."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import structlog

from .errors import SourceTimeout

log = structlog.get_logger()

T = TypeVar("T")


async def bounded(operation: Awaitable[T], timeout_ms: int, *, source: str = "") -> T:
    """Await ``operation`` for at most ``timeout_ms`` milliseconds.

    Raises SourceTimeout when the deadline passes first. The pending
    operation is cancelled; callers only ever see the timeout.
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        log.debug("source_deadline_exceeded", source=source, timeout_ms=timeout_ms)
        raise SourceTimeout(f"{source or 'request'} timed out after {timeout_ms} ms", source=source) from None
