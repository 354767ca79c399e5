"""Abstract interface for fetching raw ECB responses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol


class CancellationSignal(Protocol):
    """Anything exposing ``is_set()``, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool: ...


class BaseFetcher(ABC):
    """Defines the interface all HTTP fetchers must implement."""

    @abstractmethod
    def get(self, url: str, signal: Optional[CancellationSignal] = None) -> str:
        """Return the response body for ``url`` as text.

        Raises:
            EcbAPIError: For non-success HTTP status codes.
            EcbNetworkError: For transport failures, timeouts, or cancellation.
        """
