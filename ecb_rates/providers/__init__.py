"""Fetchers, URL construction, and SDMX-JSON decoding for the ECB data API."""

from .base import BaseFetcher, CancellationSignal
from .http_client import HTTPFetcher, HTTPFetcherConfig
from .mock import MockFetcher
from .sdmx_json import decode, parse_text
from .url_builder import build_exchange_rate_url

__all__ = [
    "BaseFetcher",
    "CancellationSignal",
    "HTTPFetcher",
    "HTTPFetcherConfig",
    "MockFetcher",
    "build_exchange_rate_url",
    "decode",
    "parse_text",
]
