"""Detection and polling of Azure long-running operations."""

import httpx

from autorest_azure.azure.constants import HEADER_ASYNC_OPERATION
from autorest_azure.azure.exceptions import MissingHeaderError
from autorest_azure.core.errors import DetailedError
from autorest_azure.core.http_client import Client
from autorest_azure.core.logging import get_logger
from autorest_azure.core.pipeline import (
    SendDecorator,
    Sender,
    by_closing,
    by_discarding_body,
    delay,
    get_cancel_event,
    get_polling_delay,
    respond,
    response_requires_polling,
)


__all__ = [
    "get_async_operation",
    "new_async_polling_request",
    "response_is_long_running",
    "with_async_polling",
]


logger = get_logger(__name__)


def get_async_operation(response: httpx.Response) -> str:
    """Return the URL to poll for a long-running operation, or ""."""
    return response.headers.get(HEADER_ASYNC_OPERATION, "")


def response_is_long_running(response: httpx.Response) -> bool:
    """Return True if ``response`` belongs to an Azure operation still in progress.

    Requires both the generic polling status (201 or 202) and a non-empty
    ``Azure-AsyncOperation`` header.
    """
    return (
        response_requires_polling(
            response, httpx.codes.CREATED, httpx.codes.ACCEPTED
        )
        and get_async_operation(response) != ""
    )


def new_async_polling_request(response: httpx.Response, client: Client) -> httpx.Request:
    """Build the GET request that polls the operation behind ``response``.

    On success the body of ``response`` is inspected, drained and closed;
    on failure it is left open for the caller.

    Raises:
        MissingHeaderError: ``Azure-AsyncOperation`` is absent
        DetailedError: the header does not hold an absolute URL
    """
    location = get_async_operation(response)
    if not location:
        raise MissingHeaderError(
            "Azure-AsyncOperation header missing from response that requires polling",
            package_type="azure",
            method="new_async_polling_request",
            status_code=response.status_code,
        )

    try:
        url = httpx.URL(location)
        if not url.is_absolute_url:
            raise httpx.InvalidURL(f"Polling location is not an absolute URL: {location}")
        request = httpx.Request("GET", url)
    except httpx.InvalidURL as e:
        raise DetailedError(
            f"Failure creating poll request to {location}",
            original=e,
            package_type="azure",
            method="new_async_polling_request",
        ) from e

    respond(response, client.by_inspecting(), by_discarding_body(), by_closing())

    return request


def with_async_polling(default_delay: float) -> SendDecorator:
    """Poll until an Azure long-running operation completes.

    The same request is re-sent while the latest response is long-running.
    The wait between attempts comes from ``Retry-After`` when present and
    ``default_delay`` (seconds) otherwise. Setting the request's cancel event
    (see ``with_cancel``) aborts a wait with PollingCancelledError.
    Transport errors propagate unchanged.
    """

    def decorator(sender: Sender) -> Sender:
        def _send(request: httpx.Request) -> httpx.Response:
            response = sender(request)
            attempt = 0
            while response_is_long_running(response):
                attempt += 1
                wait = get_polling_delay(response, default_delay)
                logger.debug(
                    "async_operation_polling",
                    attempt=attempt,
                    delay=wait,
                    status_code=response.status_code,
                    location=get_async_operation(response),
                )
                response.close()
                delay(wait, get_cancel_event(request))
                response = sender(request)

            if attempt:
                logger.debug(
                    "async_operation_finished",
                    attempts=attempt + 1,
                    status_code=response.status_code,
                )
            return response

        return _send

    return decorator
