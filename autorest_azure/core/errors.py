"""Generic error type shared by the request pipeline."""

__all__ = [
    "UNDEFINED_STATUS_CODE",
    "DetailedError",
    "PollingCancelledError",
]


# Status code reported when an error was raised without an HTTP response
UNDEFINED_STATUS_CODE = 0


class DetailedError(Exception):
    """Error raised by a preparer, sender or responder.

    Carries the package and method that produced it, the HTTP status code of
    the response involved (``UNDEFINED_STATUS_CODE`` when there was none) and
    the original error, if any.
    """

    def __init__(
        self,
        message: str = "",
        *,
        original: BaseException | None = None,
        package_type: str = "",
        method: str = "",
        status_code: int = UNDEFINED_STATUS_CODE,
    ) -> None:
        self.message = message
        self.original = original
        self.package_type = package_type
        self.method = method
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        text = f"{self.package_type}#{self.method}: {self.message}: StatusCode={self.status_code}"
        if self.original is not None:
            text += f" -- Original Error: {self.original}"
        return text


class PollingCancelledError(DetailedError):
    """Raised when a polling delay is interrupted by its cancellation event."""
