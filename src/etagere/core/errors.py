"""Error taxonomy for ISBN resolution."""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for failures raised while resolving an ISBN."""

    def __init__(self, message: str = "", *, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class SourceTimeout(ResolutionError):
    """A single upstream call exceeded its deadline."""


class TransportFailure(ResolutionError):
    """Network-level failure talking to an upstream (not a timeout)."""


class MalformedResponse(ResolutionError):
    """An upstream answered, but its XML/JSON could not be parsed."""


class NoData(ResolutionError):
    """An upstream answered, but said nothing usable about the ISBN."""


class NotFound(ResolutionError):
    """Every source was exhausted without producing a title."""


class InvalidIsbn(ResolutionError, ValueError):
    """The raw identifier contained no ISBN characters at all."""


# Failures of one query or one adapter; the resolver moves on to the next.
RECOVERABLE = (SourceTimeout, TransportFailure, MalformedResponse, NoData)
