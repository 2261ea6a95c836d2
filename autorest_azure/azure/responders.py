"""Translation of Azure error responses into RequestError."""

import httpx
from pydantic import ValidationError

from autorest_azure.azure.exceptions import (
    ErrorResponse,
    RequestError,
    ResponseDecodeError,
)
from autorest_azure.azure.request_id import extract_request_id
from autorest_azure.core.logging import get_logger
from autorest_azure.core.pipeline import (
    RespondDecorator,
    Responder,
    copy_body,
    decode_json,
    response_has_status_code,
)


logger = get_logger(__name__)


def with_error_unless_status_code(*codes: int) -> RespondDecorator:
    """Raise a RequestError built from the body unless the status is in ``codes``.

    A body that is not an Azure error document raises ResponseDecodeError
    carrying the raw body instead. Either way the response body has been
    replaced with an in-memory copy, which needs no further closing.
    """

    def decorator(responder: Responder) -> Responder:
        def _respond(response: httpx.Response) -> None:
            responder(response)
            if response_has_status_code(response, *codes):
                return

            body = copy_body(response)
            text = body.decode("utf-8", errors="replace")
            try:
                payload = ErrorResponse.model_validate(decode_json(body))
            except (ValueError, ValidationError) as e:
                raise ResponseDecodeError(text, e) from e

            if payload.error is None:
                raise ResponseDecodeError(text)

            error = RequestError(
                payload.error.message,
                service_error=payload.error,
                package_type="azure",
                method="with_error_unless_status_code",
            )
            error.request_id = extract_request_id(response)
            error.status_code = response.status_code
            logger.debug(
                "azure_service_error",
                code=payload.error.code,
                status_code=error.status_code,
                request_id=error.request_id,
            )
            raise error

        return _respond

    return decorator
