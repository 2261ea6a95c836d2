"""Azure service error model."""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from autorest_azure.core.errors import UNDEFINED_STATUS_CODE, DetailedError


__all__ = [
    "ErrorResponse",
    "MissingHeaderError",
    "RequestError",
    "ResponseDecodeError",
    "ServiceError",
    "as_request_error",
    "is_azure_error",
    "new_error_with_error",
]


class ServiceError(BaseModel):
    """Error payload reported by an Azure service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str = ""
    message: str = ""


class ErrorResponse(BaseModel):
    """Body of an Azure error response: ``{"error": {"code": ..., "message": ...}}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    error: ServiceError | None = None


class RequestError(DetailedError):
    """Error response returned by an Azure service.

    ``service_error`` is the decoded vendor payload; only when it is present
    is the error a recognized service error. ``request_id`` comes from the
    ``x-ms-request-id`` response header.
    """

    def __init__(
        self,
        message: str = "",
        *,
        service_error: ServiceError | None = None,
        request_id: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.service_error = service_error
        self.request_id = request_id

    def __str__(self) -> str:
        if self.service_error is None:
            return super().__str__()
        return (
            "azure: Service returned an error. "
            f'Code="{self.service_error.code}" '
            f'Message="{self.service_error.message}" '
            f"Status={self.status_code}"
        )


class MissingHeaderError(DetailedError):
    """A header the operation depends on is absent from the response."""


class ResponseDecodeError(Exception):
    """An error response body could not be parsed as an Azure service error."""

    def __init__(self, body: str, cause: BaseException | None = None) -> None:
        self.body = body
        self.cause = cause
        super().__init__(
            f"autorest/azure: error response cannot be parsed: {body!r} error: {cause}"
        )


def new_error_with_error(
    original: BaseException | None,
    package_type: str,
    method: str,
    response: httpx.Response | None,
    message: str,
    *args: Any,
) -> RequestError:
    """Wrap ``original`` in a RequestError.

    An ``original`` that already is a RequestError is returned unchanged.
    ``message`` is a %-format string to which ``args`` apply.
    """
    existing = as_request_error(original)
    if existing is not None:
        return existing

    return RequestError(
        message % args if args else message,
        original=original,
        package_type=package_type,
        method=method,
        status_code=response.status_code
        if response is not None
        else UNDEFINED_STATUS_CODE,
    )


def as_request_error(error: BaseException | None) -> RequestError | None:
    """Return ``error`` as a RequestError, or None when it is something else."""
    if isinstance(error, RequestError):
        return error
    return None


def is_azure_error(error: BaseException | None) -> bool:
    """Return True if ``error`` is an Azure service error."""
    return as_request_error(error) is not None
