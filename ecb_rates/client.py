"""Typed client for ECB foreign exchange reference rates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional

from requests import Session

from ecb_rates.config import (
    DEFAULT_BASE_CURRENCY,
    DEFAULT_BASE_URL,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_TIMEOUT_SECONDS,
    normalize_currency,
)
from ecb_rates.errors import EcbNoDataError, EcbValidationError
from ecb_rates.providers.base import BaseFetcher, CancellationSignal
from ecb_rates.providers.http_client import HTTPFetcher, HTTPFetcherConfig
from ecb_rates.providers.sdmx_json import decode, parse_text
from ecb_rates.providers.url_builder import build_exchange_rate_url
from ecb_rates.schemas import (
    ConversionResult,
    ExchangeRateResult,
    ExchangeRatesResult,
    RateObservation,
    RateQuery,
)
from ecb_rates.services.fx_conversion import adjust_for_base_currency, convert_amount
from ecb_rates.services.orchestrator import (
    build_fetch_query,
    resolve_query,
    select_most_recent,
    to_multi_currency_result,
    to_single_currency_result,
)
from ecb_rates.utils.datetime import subtract_calendar_days
from ecb_rates.validation import validate_date, validate_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EcbClientConfig:
    """Configuration parameters for :class:`EcbClient`."""

    base_url: str = DEFAULT_BASE_URL
    base_currency: str = DEFAULT_BASE_CURRENCY
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    session: Optional[Session] = None


class EcbClient:
    """Fetch ECB reference rates and reshape them into typed results.

    All raw rates are published against EUR. When another base currency is
    requested (per client or per query) the base currency's EUR rate is
    fetched alongside and cross rates are derived locally.

    Example::

        client = EcbClient()
        result = client.get_rate("USD", "2025-01-15")
        result.rates["2025-01-15"]  # e.g. 1.03

        usd_client = EcbClient(EcbClientConfig(base_currency="USD"))
    """

    def __init__(
        self,
        config: Optional[EcbClientConfig] = None,
        fetcher: Optional[BaseFetcher] = None,
    ) -> None:
        self._config = config or EcbClientConfig()
        self._fetcher = fetcher or HTTPFetcher(
            HTTPFetcherConfig(timeout=self._config.timeout),
            session=self._config.session,
        )

    @classmethod
    def with_fetcher(
        cls,
        fetcher: BaseFetcher,
        *,
        base_url: Optional[str] = None,
        base_currency: Optional[str] = None,
    ) -> EcbClient:
        """Create a client around a custom fetcher implementation."""

        config = EcbClientConfig(
            base_url=base_url or DEFAULT_BASE_URL,
            base_currency=base_currency or DEFAULT_BASE_CURRENCY,
        )
        return cls(config, fetcher=fetcher)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | type) -> EcbClient:
        """Create a client from a config class or a mapping of settings."""

        def _value(key: str, default: Any) -> Any:
            if isinstance(config, Mapping):
                return config.get(key, default)
            return getattr(config, key, default)

        client_config = EcbClientConfig(
            base_url=str(_value("ECB_API_BASE_URL", DEFAULT_BASE_URL)),
            base_currency=normalize_currency(
                _value("ECB_DEFAULT_BASE_CURRENCY", DEFAULT_BASE_CURRENCY)
            ),
            timeout=float(_value("REQUEST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
            lookback_days=int(_value("ECB_LOOKBACK_DAYS", DEFAULT_LOOKBACK_DAYS)),
        )
        return cls(client_config)

    @property
    def base_currency(self) -> str:
        return self._config.base_currency

    def get_rate(
        self,
        currency: str,
        date: str,
        signal: Optional[CancellationSignal] = None,
    ) -> ExchangeRateResult:
        """Return the rate on ``date``, or the nearest earlier published rate.

        The search covers a trailing lookback window ending at ``date``. When
        the rate found is for an earlier day, ``requested_date`` is set.
        """

        query = RateQuery(
            currencies=(currency,),
            start_date=self._lookback_start(date),
            end_date=date,
        )
        try:
            result = self._get_single_currency_rates(query, signal)
        except EcbNoDataError as exc:
            # Report the date asked for, not the lookback window.
            raise EcbNoDataError(exc.currencies, date) from exc
        return select_most_recent(result, date)

    def get_rate_history(
        self,
        currency: str,
        start_date: str,
        end_date: str,
        frequency: str = "D",
        signal: Optional[CancellationSignal] = None,
    ) -> ExchangeRateResult:
        query = RateQuery(
            currencies=(currency,),
            start_date=start_date,
            end_date=end_date,
            frequency=frequency,
        )
        return self._get_single_currency_rates(query, signal)

    def get_rates(
        self,
        query: RateQuery,
        signal: Optional[CancellationSignal] = None,
    ) -> ExchangeRatesResult:
        """Return rates for several currencies grouped by date."""

        resolved = resolve_query(query, self._config.base_currency)
        validate_query(resolved)
        observations = self._fetch_and_parse(resolved, signal)
        return to_multi_currency_result(observations, resolved)

    def get_observations(
        self,
        query: RateQuery,
        signal: Optional[CancellationSignal] = None,
    ) -> List[RateObservation]:
        """Return the flat observations, already expressed in the requested base."""

        resolved = resolve_query(query, self._config.base_currency)
        validate_query(resolved)
        return self._fetch_and_parse(resolved, signal)

    def convert(
        self,
        amount: float,
        currency: str,
        date: str,
        signal: Optional[CancellationSignal] = None,
    ) -> ConversionResult:
        """Convert ``amount`` of the base currency into ``currency``.

        Raises:
            EcbNoDataError: When no rate is published within the lookback window.
        """

        result = self.get_rate(currency, date, signal)
        actual_date, rate = next(iter(result.rates.items()))
        return ConversionResult(
            amount=convert_amount(amount, rate),
            rate=rate,
            date=actual_date,
            currency=currency,
            requested_date=result.requested_date,
        )

    def _get_single_currency_rates(
        self,
        query: RateQuery,
        signal: Optional[CancellationSignal],
    ) -> ExchangeRateResult:
        resolved = resolve_query(query, self._config.base_currency)
        validate_query(resolved)
        observations = self._fetch_and_parse(resolved, signal)
        return to_single_currency_result(observations, resolved)

    def _fetch_and_parse(
        self,
        query: RateQuery,
        signal: Optional[CancellationSignal],
    ) -> List[RateObservation]:
        fetch_query, needs_adjustment = build_fetch_query(query)
        url = build_exchange_rate_url(fetch_query, self._config.base_url)
        logger.debug("Requesting ECB rates from %s", url)

        raw = self._fetcher.get(url, signal)
        if not raw or not raw.strip():
            raise self._no_data(query)

        observations = decode(parse_text(raw))
        if not observations:
            raise self._no_data(query)

        if needs_adjustment:
            observations = adjust_for_base_currency(
                observations, query.currencies, query.base_currency
            )
            if not observations:
                raise self._no_data(query)
        return observations

    def _lookback_start(self, date: str) -> str:
        validate_date(date, field="date")
        try:
            return subtract_calendar_days(date, self._config.lookback_days)
        except ValueError as exc:
            raise EcbValidationError(f"Invalid date '{date}': {exc}") from exc

    @staticmethod
    def _no_data(query: RateQuery) -> EcbNoDataError:
        logger.info(
            "No ECB data for %s between %s and %s",
            ", ".join(query.currencies),
            query.start_date,
            query.end_date or query.start_date,
        )
        return EcbNoDataError(query.currencies, query.start_date, query.end_date)
