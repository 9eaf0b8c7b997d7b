"""Negotiated HTTP error responses: HTML, JSON, plain text, SVG and PNG."""

from .classification import Classification, ErrorInfo, FailureKind, classify
from .config import ErrorHandlerConfig, ImageConfig, TemplateConfig, config_from_env, load_config
from .exceptions import (
    BadRequestError,
    FaultlineError,
    HTTPError,
    IllegalStateError,
    ImageGenerationError,
    ServiceUnavailableError,
)
from .handler import ErrorContext, ErrorHandler
from .images import ErrorImageBuilder, SVGImage
from .middleware import ErrorMiddleware, compose
from .negotiation import ContentNegotiator, MIMEHeader, parse_accept
from .rendering import ErrorTemplate, FormatRenderer, RenderOutcome
from .requests import Request
from .responses import Response, ResponseWriter
from .sanitizer import sanitize

__all__ = [
    "BadRequestError",
    "Classification",
    "ContentNegotiator",
    "ErrorContext",
    "ErrorHandler",
    "ErrorHandlerConfig",
    "ErrorImageBuilder",
    "ErrorInfo",
    "ErrorMiddleware",
    "ErrorTemplate",
    "FailureKind",
    "FaultlineError",
    "FormatRenderer",
    "HTTPError",
    "IllegalStateError",
    "ImageConfig",
    "ImageGenerationError",
    "MIMEHeader",
    "RenderOutcome",
    "Request",
    "Response",
    "ResponseWriter",
    "SVGImage",
    "ServiceUnavailableError",
    "TemplateConfig",
    "classify",
    "compose",
    "config_from_env",
    "load_config",
    "parse_accept",
    "sanitize",
]
