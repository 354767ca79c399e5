"""Service layer modules."""

from .fx_conversion import adjust_for_base_currency, convert_amount, round_half_up
from .orchestrator import (
    build_fetch_query,
    reported_base,
    resolve_base_currency,
    resolve_query,
    select_most_recent,
    to_multi_currency_result,
    to_single_currency_result,
)

__all__ = [
    "adjust_for_base_currency",
    "build_fetch_query",
    "convert_amount",
    "reported_base",
    "resolve_base_currency",
    "resolve_query",
    "round_half_up",
    "select_most_recent",
    "to_multi_currency_result",
    "to_single_currency_result",
]
