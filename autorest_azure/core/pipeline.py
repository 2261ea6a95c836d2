"""Composable preparers, senders and responders over httpx.

A preparer mutates an outgoing ``httpx.Request``, a sender turns a request
into an ``httpx.Response`` and a responder inspects a response, raising to
signal failure. Each has a matching decorator type, a function that wraps
one step with another of the same shape. Decorators are applied in order,
so the last one given is the outermost.
"""

import json
import math
import threading
import time
from collections.abc import Callable
from typing import Any

import httpx

from autorest_azure.core.errors import PollingCancelledError
from autorest_azure.core.logging import get_logger


__all__ = [
    "CANCEL_EXTENSION",
    "DEFAULT_POLLING_CODES",
    "HEADER_RETRY_AFTER",
    "PrepareDecorator",
    "Preparer",
    "RespondDecorator",
    "Responder",
    "SendDecorator",
    "Sender",
    "by_closing",
    "by_discarding_body",
    "copy_body",
    "create_preparer",
    "create_responder",
    "decode_json",
    "decorate_sender",
    "delay",
    "extract_header_value",
    "get_cancel_event",
    "get_polling_delay",
    "prepare",
    "respond",
    "response_has_status_code",
    "response_requires_polling",
    "send",
    "with_cancel",
    "with_header",
]


logger = get_logger(__name__)

Preparer = Callable[[httpx.Request], httpx.Request]
PrepareDecorator = Callable[[Preparer], Preparer]
Sender = Callable[[httpx.Request], httpx.Response]
SendDecorator = Callable[[Sender], Sender]
Responder = Callable[[httpx.Response], None]
RespondDecorator = Callable[[Responder], Responder]

HEADER_RETRY_AFTER = "Retry-After"

# Request extension key holding the threading.Event that cancels polling
CANCEL_EXTENSION = "cancel"

DEFAULT_POLLING_CODES = (httpx.codes.CREATED, httpx.codes.ACCEPTED)


# --- preparers ---


def _identity_preparer(request: httpx.Request) -> httpx.Request:
    return request


def create_preparer(*decorators: PrepareDecorator) -> Preparer:
    """Chain ``decorators`` around a preparer that returns its request."""
    preparer: Preparer = _identity_preparer
    for decorate in decorators:
        preparer = decorate(preparer)
    return preparer


def prepare(request: httpx.Request, *decorators: PrepareDecorator) -> httpx.Request:
    """Run ``request`` through a preparer built from ``decorators``."""
    return create_preparer(*decorators)(request)


def with_header(name: str, value: str) -> PrepareDecorator:
    """Set header ``name`` to ``value`` after the wrapped preparer ran."""

    def decorator(preparer: Preparer) -> Preparer:
        def _prepare(request: httpx.Request) -> httpx.Request:
            request = preparer(request)
            request.headers[name] = value
            return request

        return _prepare

    return decorator


def with_cancel(event: threading.Event) -> PrepareDecorator:
    """Attach ``event`` so that setting it aborts any polling delay for the request."""

    def decorator(preparer: Preparer) -> Preparer:
        def _prepare(request: httpx.Request) -> httpx.Request:
            request = preparer(request)
            request.extensions[CANCEL_EXTENSION] = event
            return request

        return _prepare

    return decorator


def get_cancel_event(request: httpx.Request) -> threading.Event | None:
    return request.extensions.get(CANCEL_EXTENSION)


# --- senders ---


def decorate_sender(sender: Sender, *decorators: SendDecorator) -> Sender:
    for decorate in decorators:
        sender = decorate(sender)
    return sender


def send(
    request: httpx.Request, sender: Sender, *decorators: SendDecorator
) -> httpx.Response:
    """Send ``request`` through ``sender`` wrapped by ``decorators``."""
    return decorate_sender(sender, *decorators)(request)


# --- responders ---


def _noop_responder(response: httpx.Response) -> None:
    return None


def create_responder(*decorators: RespondDecorator) -> Responder:
    responder: Responder = _noop_responder
    for decorate in decorators:
        responder = decorate(responder)
    return responder


def respond(response: httpx.Response, *decorators: RespondDecorator) -> None:
    """Run ``response`` through a responder built from ``decorators``.

    Raises whatever the first failing responder raises.
    """
    create_responder(*decorators)(response)


def by_discarding_body() -> RespondDecorator:
    """Read the remaining body so the connection can be reused."""

    def decorator(responder: Responder) -> Responder:
        def _respond(response: httpx.Response) -> None:
            responder(response)
            if not response.is_closed:
                response.read()

        return _respond

    return decorator


def by_closing() -> RespondDecorator:
    """Close the response body, whether or not the wrapped responder failed."""

    def decorator(responder: Responder) -> Responder:
        def _respond(response: httpx.Response) -> None:
            try:
                responder(response)
            finally:
                response.close()

        return _respond

    return decorator


# --- response predicates and lookups ---


def response_has_status_code(response: httpx.Response | None, *codes: int) -> bool:
    if response is None:
        return False
    return response.status_code in codes


def response_requires_polling(response: httpx.Response | None, *codes: int) -> bool:
    """Return True if ``response`` reports an operation that is still running.

    A 200 never requires polling. Otherwise the status must be one of
    ``codes``, defaulting to 201 and 202.
    """
    if response is None or response.status_code == httpx.codes.OK:
        return False
    return response_has_status_code(response, *(codes or DEFAULT_POLLING_CODES))


def extract_header_value(name: str, response: httpx.Response | None) -> str:
    """Return header ``name`` of ``response``, or an empty string."""
    if response is None:
        return ""
    return response.headers.get(name, "")


def get_polling_delay(response: httpx.Response, default_delay: float) -> float:
    """Return the ``Retry-After`` delay in seconds, or ``default_delay``.

    Only the delay-seconds form is honored; dates, garbage, negative and
    non-finite values fall back to the default.
    """
    retry_after = extract_header_value(HEADER_RETRY_AFTER, response).strip()
    if not retry_after:
        return default_delay
    try:
        seconds = float(retry_after)
    except ValueError:
        logger.debug("retry_after_unparseable", value=retry_after)
        return default_delay
    if not math.isfinite(seconds) or seconds < 0:
        logger.debug("retry_after_out_of_range", value=retry_after)
        return default_delay
    return seconds


# --- delays ---


def delay(seconds: float, cancel: threading.Event | None = None) -> None:
    """Block for ``seconds``, raising PollingCancelledError if ``cancel`` fires."""
    if cancel is None:
        time.sleep(seconds)
        return
    if cancel.wait(seconds):
        raise PollingCancelledError(
            "Polling delay cancelled",
            package_type="autorest",
            method="delay",
        )


# --- bodies ---


def copy_body(response: httpx.Response) -> bytes:
    """Read and close the body of ``response``, leaving an in-memory copy behind.

    The response stream is replaced with a ``ByteStream`` of the same bytes,
    so the body stays readable downstream without further closing.
    """
    try:
        body = response.read()
    finally:
        response.close()
    response.stream = httpx.ByteStream(body)
    return body


def decode_json(body: bytes) -> Any:
    """Decode ``body`` as JSON; raises ValueError on malformed input."""
    return json.loads(body)
