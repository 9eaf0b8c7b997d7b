"""Turn a failed request into a negotiated error response."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .classification import ErrorInfo, classify
from .config import ErrorHandlerConfig, load_config
from .execution import TaskExecutor
from .images import ErrorImageBuilder
from .logs import ErrorEventLogger, level_for
from .negotiation import ContentNegotiator, MIMEHeader
from .rendering import ErrorTemplate, FormatRenderer, RenderOutcome
from .requests import Request
from .responses import ResponseWriter


@dataclass(slots=True, frozen=True)
class ErrorContext:
    """Everything needed to answer one failed request."""

    request: Request | None
    response: ResponseWriter
    status_message: str
    info: ErrorInfo
    acceptable_mimes: tuple[MIMEHeader, ...] = ()

    @property
    def error_code(self) -> int:
        return self.info.code


class ErrorHandler:
    """Classify failures, log them, and render the negotiated representation."""

    def __init__(
        self,
        config: ErrorHandlerConfig | Mapping[str, Any] | None = None,
        *,
        template: ErrorTemplate | None = None,
        events: ErrorEventLogger | None = None,
        executor: TaskExecutor | None = None,
    ) -> None:
        self.config = load_config(config) if config is not None else ErrorHandlerConfig()
        self.display_exception_details = self.config.display_exception_details
        self.template = template or ErrorTemplate.load(self.config.template)
        self.renderer = FormatRenderer(
            self.template,
            display_exception_details=self.display_exception_details,
            image_builder=ErrorImageBuilder(self.config.image),
        )
        self.negotiator = ContentNegotiator()
        self.events = events or ErrorEventLogger()
        self._executor = executor

    @property
    def executor(self) -> TaskExecutor:
        if self._executor is None:
            self._executor = TaskExecutor(self.config.execution)
        return self._executor

    def handle(
        self,
        failure: BaseException | None,
        status_code: int,
        request: Request | None,
        response: ResponseWriter,
    ) -> str:
        """Write the error response for ``failure`` and return the MIME type used."""

        classification = classify(
            failure,
            status_code,
            display_exception_details=self.display_exception_details,
        )
        acceptable = request.accept() if request is not None else ()
        context = ErrorContext(
            request=request,
            response=response,
            status_message=classification.status_message,
            info=classification.info,
            acceptable_mimes=acceptable,
        )
        return self.handle_error(context)

    def handle_error(self, context: ErrorContext) -> str:
        response = context.response
        info = context.info
        response.status_message = context.status_message
        self.events.log(level_for(info.code), context.request, info)
        response.status_code = info.code
        return self.negotiator.negotiate(
            response,
            context.acceptable_mimes,
            lambda mime: self.send_error(response, mime, info).rendered,
        )

    def send_error(self, response: ResponseWriter, mime: str, info: ErrorInfo) -> RenderOutcome:
        return self.renderer.render(response, mime, info)

    async def handle_async(
        self,
        failure: BaseException | None,
        status_code: int,
        request: Request | None,
        response: ResponseWriter,
    ) -> str:
        """Run :meth:`handle` on the bounded worker pool."""

        return await self.executor.run(self.handle, failure, status_code, request, response)

    async def shutdown(self) -> None:
        if self._executor is not None:
            await self._executor.shutdown()


__all__ = ["ErrorContext", "ErrorHandler", "ErrorInfo"]
