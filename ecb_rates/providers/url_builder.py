"""Build ECB SDMX REST URLs for the EXR (exchange rates) dataflow."""

from __future__ import annotations

from urllib.parse import urlencode

from ecb_rates.schemas import RateQuery

DATAFLOW = "EXR"
NATIVE_CURRENCY = "EUR"
DEFAULT_FREQUENCY = "D"
# Foreign exchange reference rate, average of observations through period.
EXR_TYPE = "SP00"
EXR_SUFFIX = "A"


def build_series_key(query: RateQuery) -> str:
    """Return the dotted series key, e.g. ``D.USD+GBP.EUR.SP00.A``."""

    frequency = query.frequency or DEFAULT_FREQUENCY
    base = query.base_currency or NATIVE_CURRENCY
    currencies = "+".join(query.currencies)
    return f"{frequency}.{currencies}.{base}.{EXR_TYPE}.{EXR_SUFFIX}"


def build_exchange_rate_url(query: RateQuery, base_url: str) -> str:
    """Return the fully-qualified request URL for ``query``."""

    params = {"startPeriod": query.start_date}
    if query.end_date is not None:
        params["endPeriod"] = query.end_date
    params["format"] = "jsondata"

    root = base_url.rstrip("/")
    return f"{root}/data/{DATAFLOW}/{build_series_key(query)}?{urlencode(params)}"
