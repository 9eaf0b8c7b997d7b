"""Command line utilities for faultline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Sequence

from msgspec import structs

from .config import TemplateConfig, config_from_env
from .exceptions import BadRequestError, IllegalStateError, ServiceUnavailableError
from .handler import ErrorHandler
from .logs import configure_logging
from .requests import Request
from .responses import ResponseWriter

PROJECT_NAME = "faultline"

FAILURE_FACTORIES: dict[str, Callable[[str | None], BaseException | None]] = {
    "none": lambda message: None,
    "generic": lambda message: RuntimeError(message or ""),
    "bad-request": lambda message: BadRequestError(message or "Bad Request"),
    "service-unavailable": lambda message: ServiceUnavailableError(message or "Service Unavailable"),
    "illegal-state": lambda message: IllegalStateError(message),
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROJECT_NAME, description="Error response rendering tools")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render an error response as a client would receive it")
    render.add_argument("--status", type=int, default=500, help="Ambient status code of the failed request")
    render.add_argument("--accept", default="", help="Raw Accept header sent by the client")
    render.add_argument("--content-type", default=None, help="Content type already set on the response")
    render.add_argument("--message", default=None, help="Message carried by the failure")
    render.add_argument("--kind", choices=sorted(FAILURE_FACTORIES), default="generic")
    render.add_argument("--details", action="store_true", help="Disclose exception messages and stack frames")
    render.add_argument("--template", default=None, help="Path to an alternative HTML template")
    render.add_argument("--output", default=None, help="Write the body to this file instead of stdout")
    render.add_argument("--log-level", default=None, help="Defaults to FAULTLINE_LOG_LEVEL or INFO")
    render.set_defaults(func=_cmd_render)

    return parser


def _cmd_render(args: argparse.Namespace) -> int:
    config = config_from_env()
    if args.details:
        config = structs.replace(config, display_exception_details=True)
    if args.template:
        config = structs.replace(config, template=TemplateConfig(template_path=args.template))
    configure_logging(args.log_level or config.log_level)
    handler = ErrorHandler(config)
    failure = _raised(FAILURE_FACTORIES[args.kind](args.message))
    request = Request(method="GET", path="/", headers={"accept": args.accept} if args.accept else None)
    headers = [("content-type", args.content_type)] if args.content_type else None
    writer = ResponseWriter(headers=headers)
    handler.handle(failure, args.status, request, writer)

    if args.output:
        Path(args.output).write_bytes(writer.body)
    else:
        sys.stdout.buffer.write(writer.body)
        sys.stdout.buffer.flush()
    print(
        f"{writer.status_code} {writer.status_message} {writer.header('content-type')}",
        file=sys.stderr,
    )
    return 0


def _raised(failure: BaseException | None) -> BaseException | None:
    """Give ``failure`` a traceback so stack frames can be disclosed."""

    if failure is None:
        return None
    try:
        raise failure
    except BaseException as exc:
        return exc


__all__ = ["FAILURE_FACTORIES", "PROJECT_NAME", "main"]
