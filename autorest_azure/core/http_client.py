"""HTTP client construction and the base sender used by the pipeline.

``HTTPClientFactory`` builds ``httpx.Client`` instances from settings and
``Client`` wraps one as the base sender, adding optional request/response
inspection hooks.
"""

from types import TracebackType
from typing import Any

import httpx

from autorest_azure.config.settings import Settings, get_settings
from autorest_azure.core.logging import get_logger
from autorest_azure.core.pipeline import (
    PrepareDecorator,
    Preparer,
    RespondDecorator,
    Responder,
    SendDecorator,
    decorate_sender,
    prepare,
)


logger = get_logger(__name__)


class HTTPClientFactory:
    """Factory for ``httpx.Client`` instances with consistent configuration."""

    @staticmethod
    def create_client(
        *,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> httpx.Client:
        """Create an HTTP client configured from ``settings``.

        Args:
            settings: Settings to read HTTP options from; defaults to ``get_settings()``
            **kwargs: Additional httpx.Client arguments, overriding the defaults

        Returns:
            Configured httpx.Client instance
        """
        http_settings = (settings or get_settings()).http

        timeout = httpx.Timeout(
            connect=http_settings.timeout_connect,
            read=http_settings.timeout_read,
            write=30.0,
            pool=30.0,
        )
        limits = httpx.Limits(
            max_keepalive_connections=http_settings.max_keepalive_connections,
            max_connections=http_settings.max_connections,
        )

        default_headers = {"user-agent": http_settings.user_agent}
        if "headers" in kwargs:
            default_headers.update(kwargs["headers"])
        kwargs["headers"] = default_headers

        client_config: dict[str, Any] = {
            "timeout": timeout,
            "limits": limits,
            "verify": http_settings.verify,
            **kwargs,
        }
        if "transport" in client_config:
            # limits/verify belong to the transport when one is supplied
            client_config.pop("limits")
            client_config.pop("verify")

        logger.debug(
            "http_client_created",
            timeout_connect=http_settings.timeout_connect,
            timeout_read=http_settings.timeout_read,
            max_connections=http_settings.max_connections,
            custom_transport="transport" in client_config,
        )

        return httpx.Client(**client_config)


def _log_request(preparer: Preparer) -> Preparer:
    def _prepare(request: httpx.Request) -> httpx.Request:
        request = preparer(request)
        logger.debug("http_request_prepared", method=request.method, url=str(request.url))
        return request

    return _prepare


def _log_response(responder: Responder) -> Responder:
    def _respond(response: httpx.Response) -> None:
        responder(response)
        logger.debug(
            "http_response_received",
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
        )

    return _respond


class Client:
    """Base sender for the pipeline.

    Owns an ``httpx.Client`` unless one is passed in. ``request_inspector``
    and ``response_inspector`` are decorators applied by ``with_inspection()``
    and ``by_inspecting()``; both default to structlog debug logging.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        settings: Settings | None = None,
        request_inspector: PrepareDecorator | None = None,
        response_inspector: RespondDecorator | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self.http_client = http_client or HTTPClientFactory.create_client(
            settings=self.settings
        )
        self.request_inspector = request_inspector or _log_request
        self.response_inspector = response_inspector or _log_response

    @property
    def polling_delay(self) -> float:
        """Default seconds between polls of a long-running operation."""
        return self.settings.polling.delay

    def with_inspection(self) -> PrepareDecorator:
        return self.request_inspector

    def by_inspecting(self) -> RespondDecorator:
        return self.response_inspector

    def do(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` as-is; transport errors propagate unchanged."""
        return self.http_client.send(request)

    def prepare(
        self, request: httpx.Request, *decorators: PrepareDecorator
    ) -> httpx.Request:
        return prepare(request, *decorators, self.with_inspection())

    def send(
        self, request: httpx.Request, *decorators: SendDecorator
    ) -> httpx.Response:
        """Send ``request`` through the base sender wrapped by ``decorators``."""
        return decorate_sender(self.do, *decorators)(request)

    def close(self) -> None:
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
