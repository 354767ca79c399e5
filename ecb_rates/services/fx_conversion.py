"""Cross-rate derivation and amount conversion helpers."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Dict, List

from ecb_rates.schemas import RateObservation

logger = logging.getLogger(__name__)

NATIVE_CURRENCY = "EUR"


def adjust_for_base_currency(
    observations: Iterable[RateObservation],
    requested_currencies: Sequence[str],
    target_base: str,
) -> List[RateObservation]:
    """Re-express EUR-based observations against ``target_base``.

    If 1 EUR buys ``x`` units of ``target_base`` and ``y`` units of a
    currency, then 1 ``target_base`` buys ``y / x`` units of that currency.
    The observations must include ``target_base`` itself; those points are
    consumed for the computation and never returned. When EUR is among the
    requested currencies it is synthesized as ``1 / x`` for every date.
    """

    observations = list(observations)
    native_rate_by_date: Dict[str, float] = {}
    for observation in observations:
        if observation.currency == target_base:
            native_rate_by_date[observation.date] = observation.rate

    adjusted: List[RateObservation] = []
    skipped = 0
    for observation in observations:
        if observation.currency == target_base:
            continue
        native_rate = native_rate_by_date.get(observation.date)
        if not native_rate:
            skipped += 1
            continue
        adjusted.append(
            RateObservation(
                currency=observation.currency,
                base_currency=target_base,
                date=observation.date,
                rate=observation.rate / native_rate,
            )
        )

    if NATIVE_CURRENCY in requested_currencies:
        for date, native_rate in native_rate_by_date.items():
            if native_rate == 0:
                continue
            adjusted.append(
                RateObservation(
                    currency=NATIVE_CURRENCY,
                    base_currency=target_base,
                    date=date,
                    rate=1 / native_rate,
                )
            )

    if skipped:
        logger.debug(
            "Dropped %s observations without a %s rate on the same date",
            skipped,
            target_base,
        )
    return adjusted


def round_half_up(value: float, places: int = 2) -> float:
    """Round ``value`` to ``places`` decimals, halves rounding towards +infinity."""

    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def convert_amount(amount: float, rate: float) -> float:
    """Convert an amount in the base currency and round it to the cent."""

    return round_half_up(amount * rate)
