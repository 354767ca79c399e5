"""Mock fetcher for testing and local development."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, List, Optional

from .base import BaseFetcher, CancellationSignal


class MockFetcher(BaseFetcher):
    """Return a canned SDMX-JSON document (or raw body) for every request."""

    def __init__(self, response: Mapping[str, Any] | str) -> None:
        self._response = response
        self.requested_urls: List[str] = []

    def get(self, url: str, signal: Optional[CancellationSignal] = None) -> str:
        self.requested_urls.append(url)
        if isinstance(self._response, str):
            return self._response
        return json.dumps(self._response)
