"""Azure-specific preparers, senders and responders."""

from .constants import (
    HEADER_ASYNC_OPERATION,
    HEADER_CLIENT_ID,
    HEADER_REQUEST_ID,
    HEADER_RETURN_CLIENT_ID,
)
from .exceptions import (
    ErrorResponse,
    MissingHeaderError,
    RequestError,
    ResponseDecodeError,
    ServiceError,
    as_request_error,
    is_azure_error,
    new_error_with_error,
)
from .polling import (
    get_async_operation,
    new_async_polling_request,
    response_is_long_running,
    with_async_polling,
)
from .request_id import (
    extract_client_id,
    extract_request_id,
    with_client_id,
    with_return_client_id,
    with_returning_client_id,
)
from .responders import with_error_unless_status_code


__all__ = [
    "HEADER_ASYNC_OPERATION",
    "HEADER_CLIENT_ID",
    "HEADER_REQUEST_ID",
    "HEADER_RETURN_CLIENT_ID",
    "ErrorResponse",
    "MissingHeaderError",
    "RequestError",
    "ResponseDecodeError",
    "ServiceError",
    "as_request_error",
    "extract_client_id",
    "extract_request_id",
    "get_async_operation",
    "is_azure_error",
    "new_async_polling_request",
    "new_error_with_error",
    "response_is_long_running",
    "with_async_polling",
    "with_client_id",
    "with_error_unless_status_code",
    "with_return_client_id",
    "with_returning_client_id",
]
