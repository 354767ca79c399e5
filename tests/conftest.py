"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from ecb_rates.client import EcbClient  # noqa: E402
from ecb_rates.providers.mock import MockFetcher  # noqa: E402
from tests.fixtures import load_json  # noqa: E402


@pytest.fixture()
def load_json_fixture() -> Callable[[str], dict[str, Any]]:
    """Load a JSON fixture by filename."""

    return load_json


@pytest.fixture()
def make_client() -> Callable[..., EcbClient]:
    """Build a client backed by a MockFetcher serving ``response``."""

    def _factory(response: dict[str, Any] | str, **kwargs: Any) -> EcbClient:
        return EcbClient.with_fetcher(MockFetcher(response), **kwargs)

    return _factory
