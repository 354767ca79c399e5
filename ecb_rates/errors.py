"""Error hierarchy raised by the ECB exchange rate client."""

from __future__ import annotations

from collections.abc import Sequence


class EcbError(Exception):
    """Base class for all client errors."""

    code: str = "ECB_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class EcbValidationError(EcbError):
    """Raised when a caller-supplied query is malformed."""

    code = "ECB_VALIDATION_ERROR"


class EcbAPIError(EcbError):
    """Raised when the ECB API answers with a non-success status."""

    code = "ECB_API_ERROR"

    def __init__(self, status_code: int, status_text: str, body: str = "") -> None:
        message = f"ECB API returned {status_code} {status_text}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


class EcbNetworkError(EcbError):
    """Raised on transport failure, timeout, or cancellation."""

    code = "ECB_NETWORK_ERROR"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EcbParseError(EcbError):
    """Raised when a response body violates the SDMX-JSON contract."""

    code = "ECB_PARSE_ERROR"


class EcbNoDataError(EcbError):
    """Raised when a well-formed response carries no usable observations."""

    code = "ECB_NO_DATA"

    def __init__(
        self,
        currencies: Sequence[str],
        start_date: str,
        end_date: str | None = None,
    ) -> None:
        self.currencies = list(currencies)
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        joined = ", ".join(self.currencies)
        if self.end_date is None or self.end_date == self.start_date:
            period = f"on {self.start_date}"
        else:
            period = f"from {self.start_date} to {self.end_date}"
        return (
            f"No exchange rate data available for {joined} {period}. "
            "The ECB publishes no rates on weekends, TARGET holidays, or future dates."
        )
