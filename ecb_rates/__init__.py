"""Typed client for ECB foreign exchange reference rates (SDMX-JSON)."""

from __future__ import annotations

from importlib import metadata as importlib_metadata

from ecb_rates.client import EcbClient, EcbClientConfig
from ecb_rates.errors import (
    EcbAPIError,
    EcbError,
    EcbNetworkError,
    EcbNoDataError,
    EcbParseError,
    EcbValidationError,
)
from ecb_rates.schemas import (
    ConversionResult,
    ExchangeRateResult,
    ExchangeRatesResult,
    RateObservation,
    RateQuery,
)

__all__ = [
    "__version__",
    "ConversionResult",
    "EcbAPIError",
    "EcbClient",
    "EcbClientConfig",
    "EcbError",
    "EcbNetworkError",
    "EcbNoDataError",
    "EcbParseError",
    "EcbValidationError",
    "ExchangeRateResult",
    "ExchangeRatesResult",
    "RateObservation",
    "RateQuery",
]

try:
    __version__ = importlib_metadata.version("ecb-rates")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"
