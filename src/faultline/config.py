"""Error handler configuration objects."""

from __future__ import annotations

import os
from typing import Any, Mapping

import msgspec
from msgspec import Struct

from .execution import ExecutionConfig

DEFAULT_TITLE = "\U0001F916 bip... bip... something wrong happened!"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class ImageConfig(Struct, frozen=True):
    """Geometry and palette shared by the SVG and PNG error images."""

    font_size: int = 14
    padding: int = 20
    line_spacing: float = 1.4
    char_width_ratio: float = 0.6
    foreground: str = "#b00020"
    background: str = "#ffffff"
    font_family: str = "monospace"
    max_lines: int = 200
    max_line_length: int = 500


class TemplateConfig(Struct, frozen=True):
    """Locations of the HTML error page and the assets baked into it.

    ``None`` selects the copy packaged with :mod:`faultline`.
    """

    template_path: str | None = None
    stylesheet_path: str | None = None
    logo_path: str | None = None
    title: str = DEFAULT_TITLE


class ErrorHandlerConfig(Struct, frozen=True):
    """Typed configuration for an :class:`~faultline.handler.ErrorHandler`."""

    display_exception_details: bool = False
    log_level: str = "INFO"
    template: TemplateConfig = TemplateConfig()
    image: ImageConfig = ImageConfig()
    execution: ExecutionConfig = ExecutionConfig()


def load_config(config: ErrorHandlerConfig | Mapping[str, Any]) -> ErrorHandlerConfig:
    """Return ``config`` as an :class:`ErrorHandlerConfig`, converting mappings."""

    if isinstance(config, ErrorHandlerConfig):
        return config
    return msgspec.convert(config, type=ErrorHandlerConfig)


def config_from_env(environ: Mapping[str, str] | None = None) -> ErrorHandlerConfig:
    """Build a configuration from ``FAULTLINE_*`` environment variables."""

    env = os.environ if environ is None else environ
    raw: dict[str, Any] = {}
    details = env.get("FAULTLINE_DISPLAY_EXCEPTION_DETAILS")
    if details is not None:
        raw["display_exception_details"] = details.strip().lower() in _TRUTHY
    level = env.get("FAULTLINE_LOG_LEVEL")
    if level:
        raw["log_level"] = level.strip().upper()
    template_path = env.get("FAULTLINE_TEMPLATE_PATH")
    if template_path:
        raw["template"] = {"template_path": template_path}
    workers = env.get("FAULTLINE_MAX_WORKERS")
    if workers:
        raw["execution"] = {"max_workers": workers}
    return msgspec.convert(raw, type=ErrorHandlerConfig, strict=False)


__all__ = [
    "DEFAULT_TITLE",
    "ErrorHandlerConfig",
    "ImageConfig",
    "TemplateConfig",
    "config_from_env",
    "load_config",
]
