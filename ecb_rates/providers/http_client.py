"""HTTP fetcher for the ECB data API with deadline and cancellation support."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response, Session
from requests.exceptions import RequestException, Timeout

from ecb_rates.errors import EcbAPIError, EcbNetworkError
from ecb_rates.logging import fetch_log_extra

from .base import BaseFetcher, CancellationSignal

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
CHUNK_SIZE = 16 * 1024
POLL_INTERVAL_SECONDS = 0.05


@dataclass(frozen=True)
class HTTPFetcherConfig:
    """Configuration for the HTTP fetcher."""

    timeout: float = DEFAULT_TIMEOUT_SECONDS


class _Aborted(Exception):
    """Internal marker for a deadline or cancellation hit mid-transfer."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class _PendingRequest:
    """A ``session.get`` running on a daemon thread."""

    def __init__(self, session: Session, url: str, **kwargs: Any) -> None:
        self._session = session
        self._url = url
        self._kwargs = kwargs
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._abandoned = False
        self._response: Optional[Response] = None
        self._error: Optional[Exception] = None
        self._thread = threading.Thread(target=self._run, name="ecb-fetch", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def wait(self, timeout: float) -> bool:
        return self._done.wait(timeout)

    def result(self) -> Response:
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response

    def abandon(self) -> None:
        with self._lock:
            self._abandoned = True
            response = self._response
        if response is not None:
            response.close()

    def _run(self) -> None:
        try:
            response = self._session.get(self._url, **self._kwargs)
        except Exception as exc:  # re-raised on the calling thread
            self._error = exc
            self._done.set()
            return
        with self._lock:
            self._response = response
            abandoned = self._abandoned
        if abandoned:
            response.close()
        self._done.set()


class HTTPFetcher(BaseFetcher):
    """Fetch text bodies with a single GET, no retries.

    The request races an overall deadline (``config.timeout``) and an optional
    external cancellation signal. Both are polled while waiting for headers
    and checked between streamed body chunks. Whichever fires first abandons
    the request and closes its response.
    """

    def __init__(
        self,
        config: Optional[HTTPFetcherConfig] = None,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config or HTTPFetcherConfig()
        self._session = session or requests.Session()

    def get(self, url: str, signal: Optional[CancellationSignal] = None) -> str:
        timeout_ms = int(self._config.timeout * 1000)
        start = time.monotonic()
        deadline = start + self._config.timeout

        if signal is not None and signal.is_set():
            raise EcbNetworkError(f"Request to {url} was cancelled before it was sent")

        try:
            response = self._send(url, deadline, signal)
        except _Aborted as aborted:
            self._log_failure(url, start, aborted.reason, None)
            raise self._aborted_error(aborted, url, timeout_ms) from None
        except Timeout as exc:
            self._log_failure(url, start, "timeout", str(exc))
            raise EcbNetworkError(
                f"Request timed out after {timeout_ms}ms: {url}", cause=exc
            ) from exc
        except RequestException as exc:
            self._log_failure(url, start, "error", str(exc))
            raise EcbNetworkError(f"Network error while fetching {url}: {exc}", cause=exc) from exc

        try:
            if not response.ok:
                body = self._read_error_body(response)
                self._log_failure(url, start, str(response.status_code), body or None)
                raise EcbAPIError(response.status_code, response.reason or "", body)

            try:
                text = self._read_body(response, deadline, signal)
            except _Aborted as aborted:
                self._log_failure(url, start, aborted.reason, None)
                raise self._aborted_error(aborted, url, timeout_ms) from None
            except Timeout as exc:
                self._log_failure(url, start, "timeout", str(exc))
                raise EcbNetworkError(
                    f"Request timed out after {timeout_ms}ms: {url}", cause=exc
                ) from exc
            except RequestException as exc:
                self._log_failure(url, start, "error", str(exc))
                raise EcbNetworkError(
                    f"Network error while fetching {url}: {exc}", cause=exc
                ) from exc
        finally:
            response.close()

        logger.info(
            "ECB fetch succeeded",
            extra=fetch_log_extra(
                url=url,
                status=str(response.status_code),
                duration_ms=(time.monotonic() - start) * 1000,
            ),
        )
        return text

    def _send(
        self,
        url: str,
        deadline: float,
        signal: Optional[CancellationSignal],
    ) -> Response:
        """Wait for the status line and headers on a worker thread.

        The calling thread polls the signal and the deadline meanwhile. An
        abandoned request keeps its worker until the socket read timeout and
        its response is closed as soon as it arrives.
        """

        pending = _PendingRequest(
            self._session,
            url,
            headers={"Accept": "application/json"},
            timeout=self._config.timeout,
            stream=True,
        )
        pending.start()
        while True:
            if signal is not None and signal.is_set():
                pending.abandon()
                raise _Aborted("cancelled")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                pending.abandon()
                raise _Aborted("timeout")
            if pending.wait(min(remaining, POLL_INTERVAL_SECONDS)):
                return pending.result()

    @staticmethod
    def _aborted_error(aborted: _Aborted, url: str, timeout_ms: int) -> EcbNetworkError:
        if aborted.reason == "timeout":
            return EcbNetworkError(f"Request timed out after {timeout_ms}ms: {url}")
        return EcbNetworkError(f"Request to {url} was cancelled")

    @staticmethod
    def _read_body(
        response: Response,
        deadline: float,
        signal: Optional[CancellationSignal],
    ) -> str:
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if signal is not None and signal.is_set():
                raise _Aborted("cancelled")
            if time.monotonic() >= deadline:
                raise _Aborted("timeout")
            if chunk:
                chunks.append(chunk)
        encoding = response.encoding or "utf-8"
        return b"".join(chunks).decode(encoding, errors="replace")

    @staticmethod
    def _read_error_body(response: Response) -> str:
        try:
            return response.text
        except (RequestException, UnicodeDecodeError) as exc:
            logger.debug("Could not read error body: %s", exc)
            return ""

    @staticmethod
    def _log_failure(url: str, start: float, status: str, error: Optional[str]) -> None:
        logger.warning(
            "ECB fetch failed: %s",
            error or status,
            extra=fetch_log_extra(
                url=url,
                status=status,
                duration_ms=(time.monotonic() - start) * 1000,
                error=error,
            ),
        )
