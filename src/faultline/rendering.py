"""Per-MIME rendering strategies for error responses.

Strategies form an ordered table of ``(predicate, render)`` pairs. The first
strategy whose predicate accepts the candidate media type renders it. A
strategy either writes the complete response and reports
:data:`RENDERED`, or reports :data:`DECLINED` without touching the response.
"""

from __future__ import annotations

import logging
import re
import traceback
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .classification import ErrorInfo
from .config import DEFAULT_TITLE, TemplateConfig
from .exceptions import ImageGenerationError
from .images import ErrorImageBuilder
from .negotiation import media_type_of
from .sanitizer import sanitize
from .serialization import json_encode

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .responses import ResponseWriter

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
SVG_CONTENT_TYPE = "image/svg+xml"
PNG_CONTENT_TYPE = "image/png"
_PLACEHOLDER = re.compile(r"\{(title|errorCode|errorMessage|stackTrace)\}")


@dataclass(slots=True, frozen=True)
class RenderOutcome:
    rendered: bool


RENDERED = RenderOutcome(rendered=True)
DECLINED = RenderOutcome(rendered=False)


def _read_asset(path: str | None, packaged: str) -> str:
    if path is not None:
        return Path(path).read_text(encoding="utf-8")
    return resources.files("faultline").joinpath("assets", packaged).read_text(encoding="utf-8")


@dataclass(slots=True, frozen=True)
class ErrorTemplate:
    """HTML error page with the stylesheet and logo already inlined.

    Built once at startup and shared read-only between requests.
    """

    source: str
    title: str = DEFAULT_TITLE

    @classmethod
    def load(cls, config: TemplateConfig | None = None) -> "ErrorTemplate":
        config = config or TemplateConfig()
        stylesheet = _read_asset(config.stylesheet_path, "main.css")
        logo = _read_asset(config.logo_path, "logo.svg")
        source = (
            _read_asset(config.template_path, "error.html")
            .replace("{stylesheet}", stylesheet)
            .replace("{logo}", logo)
        )
        return cls(source=source, title=config.title)

    def render(self, *, code: int, message: str, stack_trace: str) -> str:
        # One pass over the page: substituted values are never rescanned for tokens.
        values = {"title": self.title, "errorCode": str(code), "errorMessage": message, "stackTrace": stack_trace}
        return _PLACEHOLDER.sub(lambda match: values[match.group(1)], self.source)


def stack_frames(cause: BaseException | None) -> list[str]:
    """Return one ``name (file:line)`` string per traceback entry of ``cause``."""

    if cause is None or cause.__traceback__ is None:
        return []
    return [
        f"{frame.name} ({frame.filename}:{frame.lineno})"
        for frame in traceback.extract_tb(cause.__traceback__)
    ]


def compose_error_message(info: ErrorInfo, *, display_exception_details: bool) -> str:
    """Return the plain text body, also drawn into the error images."""

    text = f"Error {info.code}: {info.message}"
    if not display_exception_details:
        return text
    frames = stack_frames(info.cause)
    if not frames:
        return text
    return text + "".join(f"\tat {frame}\n" for frame in frames)


RenderFn = Callable[["ResponseWriter", ErrorInfo], RenderOutcome]


@dataclass(slots=True, frozen=True)
class RenderStrategy:
    name: str
    matches: Callable[[str], bool]
    render: RenderFn


def _prefixed(*prefixes: str) -> Callable[[str], bool]:
    def matches(media_type: str) -> bool:
        return media_type.startswith(prefixes)

    return matches


class FormatRenderer:
    """Render an :class:`ErrorInfo` for a negotiated MIME type."""

    def __init__(
        self,
        template: ErrorTemplate,
        *,
        display_exception_details: bool = False,
        image_builder: ErrorImageBuilder | None = None,
    ) -> None:
        self.template = template
        self.display_exception_details = display_exception_details
        self.image_builder = image_builder or ErrorImageBuilder()
        self.strategies: tuple[RenderStrategy, ...] = (
            RenderStrategy("html", _prefixed("text/html"), self.render_html),
            RenderStrategy("json", _prefixed("application/json"), self.render_json),
            RenderStrategy("text", _prefixed("text/plain"), self.render_text),
            RenderStrategy("svg", _prefixed("image/svg+xml"), self.render_svg),
            RenderStrategy("png", _prefixed("image/png", "image/*"), self.render_png),
        )

    def strategy_for(self, mime: str) -> RenderStrategy | None:
        media_type = media_type_of(mime)
        for strategy in self.strategies:
            if strategy.matches(media_type):
                return strategy
        return None

    def render(self, response: "ResponseWriter", mime: str, info: ErrorInfo) -> RenderOutcome:
        strategy = self.strategy_for(mime)
        if strategy is None:
            return DECLINED
        return strategy.render(response, info)

    def _frames(self, info: ErrorInfo) -> list[str]:
        if not self.display_exception_details:
            return []
        return stack_frames(info.cause)

    def render_html(self, response: "ResponseWriter", info: ErrorInfo) -> RenderOutcome:
        stack_trace = "".join(f"<li>{sanitize(frame)}</li>" for frame in self._frames(info))
        body = self.template.render(code=info.code, message=sanitize(info.markup), stack_trace=stack_trace)
        response.put_header("content-type", HTML_CONTENT_TYPE)
        response.end(body)
        return RENDERED

    def render_json(self, response: "ResponseWriter", info: ErrorInfo) -> RenderOutcome:
        payload: dict[str, object] = {"error": {"code": info.code, "message": info.message}}
        if info.cause is not None and self.display_exception_details:
            payload["stack"] = stack_frames(info.cause)
        response.put_header("content-type", JSON_CONTENT_TYPE)
        response.end(json_encode(payload))
        return RENDERED

    def render_text(self, response: "ResponseWriter", info: ErrorInfo) -> RenderOutcome:
        body = compose_error_message(info, display_exception_details=self.display_exception_details)
        response.put_header("content-type", TEXT_CONTENT_TYPE)
        response.end(body)
        return RENDERED

    def render_svg(self, response: "ResponseWriter", info: ErrorInfo) -> RenderOutcome:
        text = compose_error_message(info, display_exception_details=self.display_exception_details)
        try:
            image = self.image_builder.build_svg_image(text)
        except ImageGenerationError:
            logger.warning("Unable to generate error image", exc_info=True)
            return DECLINED
        response.put_header("content-type", SVG_CONTENT_TYPE)
        response.end(image.source)
        return RENDERED

    def render_png(self, response: "ResponseWriter", info: ErrorInfo) -> RenderOutcome:
        text = compose_error_message(info, display_exception_details=self.display_exception_details)
        try:
            data = self.image_builder.build_png(text)
        except ImageGenerationError:
            logger.warning("Unable to generate error image", exc_info=True)
            return DECLINED
        response.put_header("content-type", PNG_CONTENT_TYPE)
        response.end(data)
        return RENDERED


__all__ = [
    "DECLINED",
    "RENDERED",
    "ErrorTemplate",
    "FormatRenderer",
    "RenderOutcome",
    "RenderStrategy",
    "compose_error_message",
    "stack_frames",
]
