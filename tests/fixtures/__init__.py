"""Test fixture helpers."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, cast

_FIXTURE_ROOT = Path(__file__).parent

SINGLE_CURRENCY = "sdmx_single_currency.json"
MULTI_CURRENCY = "sdmx_multi_currency.json"
CROSS_CURRENCY = "sdmx_cross_currency.json"
EMPTY = "sdmx_empty.json"


def load_json(name: str) -> dict[str, Any]:
    """Load an SDMX-JSON fixture by filename."""

    data = json.loads((_FIXTURE_ROOT / name).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Fixture '{name}' does not contain a JSON object.")
    return cast(dict[str, Any], data)


def with_series_dimensions(document: dict[str, Any], series: list[dict[str, Any]]) -> dict[str, Any]:
    """Return ``document`` with its series dimension declarations replaced."""

    patched = copy.deepcopy(document)
    patched["structure"]["dimensions"]["series"] = series
    return patched


def with_data_sets(document: dict[str, Any], data_sets: Any) -> dict[str, Any]:
    patched = copy.deepcopy(document)
    patched["dataSets"] = data_sets
    return patched
