"""Dataclasses describing queries, observations, and shaped results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

Frequency = Literal["D", "W", "M", "Q", "A"]

SUPPORTED_FREQUENCIES: Tuple[str, ...] = ("D", "W", "M", "Q", "A")


@dataclass(frozen=True)
class RateObservation:
    """Single rate point: 1 ``base_currency`` buys ``rate`` units of ``currency``."""

    currency: str
    base_currency: str
    date: str
    rate: float


@dataclass(frozen=True)
class RateQuery:
    """Caller request for one or more currencies over a date range."""

    currencies: Tuple[str, ...]
    start_date: str
    end_date: Optional[str] = None
    base_currency: Optional[str] = None
    frequency: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "currencies", tuple(self.currencies))


@dataclass(frozen=True)
class ExchangeRateResult:
    """Rates for a single currency keyed by date."""

    base: str
    currency: str
    rates: Dict[str, float] = field(default_factory=dict)
    requested_date: Optional[str] = None


@dataclass(frozen=True)
class ExchangeRatesResult:
    """Rates for several currencies keyed by date, then currency."""

    base: str
    currencies: Tuple[str, ...]
    rates: Dict[str, Dict[str, float]] = field(default_factory=dict)


@dataclass(frozen=True)
class ConversionResult:
    """Amount converted from the base currency at the nearest available rate."""

    amount: float
    rate: float
    date: str
    currency: str
    requested_date: Optional[str] = None
