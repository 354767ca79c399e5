"""Validation helpers for exchange rate queries."""

from __future__ import annotations

import re

from ecb_rates.errors import EcbValidationError
from ecb_rates.schemas import SUPPORTED_FREQUENCIES, RateQuery

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
# Format only; calendar validity (e.g. month 13) is left to the API.
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_currency_code(value: object, *, field: str = "currency") -> str:
    """Ensure ``value`` is a three-letter uppercase currency code."""

    if not isinstance(value, str) or not CURRENCY_PATTERN.match(value):
        raise EcbValidationError(
            f"Invalid {field} '{value}'. Expected a 3-letter uppercase ISO 4217 code."
        )
    return value


def validate_date(value: object, *, field: str) -> str:
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise EcbValidationError(f"Invalid {field} '{value}'. Expected YYYY-MM-DD.")
    return value


def validate_query(query: RateQuery) -> None:
    """Reject malformed queries before any network call is made."""

    if not query.currencies:
        raise EcbValidationError("At least one currency must be requested.")

    for code in query.currencies:
        validate_currency_code(code)

    validate_date(query.start_date, field="startDate")
    if query.end_date is not None:
        validate_date(query.end_date, field="endDate")
        if query.start_date > query.end_date:
            raise EcbValidationError(
                f"startDate '{query.start_date}' must not be after endDate '{query.end_date}'."
            )

    if query.base_currency is not None:
        validate_currency_code(query.base_currency, field="baseCurrency")
        if len(query.currencies) == 1 and query.currencies[0] == query.base_currency:
            raise EcbValidationError(
                f"Currency '{query.base_currency}' cannot be priced against itself."
            )

    if query.frequency is not None and query.frequency not in SUPPORTED_FREQUENCIES:
        raise EcbValidationError(
            f"Unsupported frequency '{query.frequency}'. "
            f"Allowed values: {', '.join(SUPPORTED_FREQUENCIES)}."
        )
