"""Query resolution and result shaping around a single fetch."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import Dict, Optional, Tuple

from ecb_rates.schemas import (
    ExchangeRateResult,
    ExchangeRatesResult,
    RateObservation,
    RateQuery,
)
from ecb_rates.services.fx_conversion import NATIVE_CURRENCY


def resolve_base_currency(query_base: Optional[str], client_default: str) -> str:
    """Return the base currency for a request.

    Precedence: the query's own base currency, then the client default.
    """

    if query_base is not None:
        return query_base
    return client_default


def resolve_query(query: RateQuery, client_default: str) -> RateQuery:
    """Fill an absent base currency on ``query`` with the client default."""

    base = resolve_base_currency(query.base_currency, client_default)
    if base == query.base_currency:
        return query
    return replace(query, base_currency=base)


def reported_base(observations: Sequence[RateObservation], query: RateQuery) -> str:
    """Base reported on shaped results.

    Precedence: the first observation's base currency, then the resolved
    query's base, then the native currency.
    """

    if observations:
        return observations[0].base_currency
    return query.base_currency or NATIVE_CURRENCY


def build_fetch_query(query: RateQuery) -> Tuple[RateQuery, bool]:
    """Return the query to send upstream and whether cross rates are needed.

    For a non-native base the base currency is added to the fetched
    currencies (once) and the fetch itself is denominated in EUR.
    """

    base = query.base_currency or NATIVE_CURRENCY
    if base == NATIVE_CURRENCY:
        return query, False

    currencies = query.currencies
    if base not in currencies:
        currencies = currencies + (base,)
    return replace(query, currencies=currencies, base_currency=NATIVE_CURRENCY), True


def to_single_currency_result(
    observations: Sequence[RateObservation], query: RateQuery
) -> ExchangeRateResult:
    rates: Dict[str, float] = {}
    for observation in observations:
        rates[observation.date] = observation.rate

    return ExchangeRateResult(
        base=reported_base(observations, query),
        currency=query.currencies[0],
        rates=rates,
    )


def to_multi_currency_result(
    observations: Sequence[RateObservation], query: RateQuery
) -> ExchangeRatesResult:
    rates: Dict[str, Dict[str, float]] = {}
    for observation in observations:
        rates.setdefault(observation.date, {})[observation.currency] = observation.rate

    return ExchangeRatesResult(
        base=reported_base(observations, query),
        currencies=query.currencies,
        rates=rates,
    )


def select_most_recent(result: ExchangeRateResult, requested_date: str) -> ExchangeRateResult:
    """Collapse ``result`` to its latest date.

    ``requested_date`` is carried only when it differs from the date found,
    i.e. when the nearest earlier rate stands in for a weekend or holiday.
    """

    if not result.rates:
        return result

    # ISO dates sort lexicographically.
    latest = max(result.rates)
    return ExchangeRateResult(
        base=result.base,
        currency=result.currency,
        rates={latest: result.rates[latest]},
        requested_date=requested_date if latest != requested_date else None,
    )
