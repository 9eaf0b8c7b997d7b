"""Markup sanitization for strings interpolated into the HTML error page."""

from __future__ import annotations

import nh3


def sanitize(raw: str | None) -> str:
    """Strip every tag from ``raw`` and escape the remaining text.

    ``script`` and ``style`` elements are dropped together with their
    content.
    """

    if not raw:
        return ""
    return nh3.clean(raw, tags=set(), attributes={})


__all__ = ["sanitize"]
