"""Content negotiation for error responses.

Candidates are attempted strictly in the order the client listed them in its
``Accept`` header. Quality values are parsed and exposed on
:class:`MIMEHeader` but never used to reorder the list.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

import msgspec

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .responses import ResponseWriter

logger = logging.getLogger(__name__)

FALLBACK_MIME = "text/plain"

Attempt = Callable[[str], bool]


class MIMEHeader(msgspec.Struct, frozen=True):
    """One entry of an ``Accept`` header."""

    value: str
    media_type: str
    quality: float = 1.0
    params: tuple[tuple[str, str], ...] = ()


def media_type_of(value: str) -> str:
    """Return the lower-cased media type of ``value`` without parameters."""

    return value.split(";", 1)[0].strip().lower()


def parse_accept(header: str | None) -> tuple[MIMEHeader, ...]:
    """Split an ``Accept`` header into entries, preserving the client's order."""

    if not header:
        return ()
    entries: list[MIMEHeader] = []
    for raw_part in header.split(","):
        token = raw_part.strip()
        if not token:
            continue
        parts = [segment.strip() for segment in token.split(";") if segment.strip()]
        if not parts:
            continue
        quality = 1.0
        params: list[tuple[str, str]] = []
        for param in parts[1:]:
            name, _, value = param.partition("=")
            name = name.strip().lower()
            value = value.strip().strip('"')
            if name == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
                continue
            params.append((name, value))
        entries.append(
            MIMEHeader(value=token, media_type=parts[0].lower(), quality=quality, params=tuple(params))
        )
    return tuple(entries)


class ContentNegotiator:
    """Drive render attempts until one succeeds, forcing plain text last."""

    __slots__ = ("fallback",)

    def __init__(self, fallback: str = FALLBACK_MIME) -> None:
        self.fallback = fallback

    def candidates(self, response: "ResponseWriter", acceptable: Iterable[MIMEHeader]) -> list[str]:
        """Return the ordered MIME candidates, excluding the forced fallback."""

        ordered: list[str] = []
        preset = response.header("content-type")
        if preset:
            ordered.append(preset)
        ordered.extend(mime.value for mime in acceptable)
        return ordered

    def negotiate(
        self,
        response: "ResponseWriter",
        acceptable: Iterable[MIMEHeader],
        attempt: Attempt,
    ) -> str:
        """Attempt each candidate in turn and return the MIME that rendered."""

        for mime in self.candidates(response, acceptable):
            if attempt(mime):
                return mime
        logger.debug("No acceptable representation rendered, forcing %s", self.fallback)
        if not attempt(self.fallback):
            raise RuntimeError(f"Fallback representation {self.fallback!r} declined")
        return self.fallback


__all__ = [
    "FALLBACK_MIME",
    "ContentNegotiator",
    "MIMEHeader",
    "media_type_of",
    "parse_accept",
]
