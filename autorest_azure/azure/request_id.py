"""Preparers and extractors for Azure correlation headers."""

import httpx

from autorest_azure.azure.constants import (
    HEADER_CLIENT_ID,
    HEADER_REQUEST_ID,
    HEADER_RETURN_CLIENT_ID,
)
from autorest_azure.core.pipeline import (
    PrepareDecorator,
    Preparer,
    create_preparer,
    extract_header_value,
    with_header,
)


def with_client_id(uuid: str) -> PrepareDecorator:
    """Set ``x-ms-client-request-id`` to the undecorated ``uuid``.

    The value is passed through as given, e.g.
    "0F39878C-5F76-4DB8-A25D-61D2C193C3CA".
    """
    return with_header(HEADER_CLIENT_ID, uuid)


def with_return_client_id(flag: bool) -> PrepareDecorator:
    """Set ``x-ms-return-client-request-id`` to "true" or "false"."""
    return with_header(HEADER_RETURN_CLIENT_ID, "true" if flag else "false")


def with_returning_client_id(uuid: str) -> PrepareDecorator:
    """Set the client ID and ask the service to echo it in the response."""
    tagger = create_preparer(with_client_id(uuid), with_return_client_id(True))

    def decorator(preparer: Preparer) -> Preparer:
        def _prepare(request: httpx.Request) -> httpx.Request:
            return tagger(preparer(request))

        return _prepare

    return decorator


def extract_client_id(response: httpx.Response | None) -> str:
    """Return the ``x-ms-client-request-id`` echoed by the service, or ""."""
    return extract_header_value(HEADER_CLIENT_ID, response)


def extract_request_id(response: httpx.Response | None) -> str:
    """Return the service-generated ``x-ms-request-id``, or ""."""
    return extract_header_value(HEADER_REQUEST_ID, response)
