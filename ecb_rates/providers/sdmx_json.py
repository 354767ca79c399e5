"""Decode SDMX-JSON data messages into flat rate observations.

An SDMX-JSON message compacts an N-dimensional cross-product into a single
mapping per data set. Each series is keyed by a colon-separated list of
integer indices, one per *series* dimension, in the order the dimensions are
declared under ``structure.dimensions.series``. Each observation inside a
series is keyed by an index into the *observation* dimension (the time
axis). The keys carry no labels, so decoding means resolving the declared
dimension positions first and then translating indices into coded values.

Structural defects (a missing dimension declaration) are fatal. Per-datum
anomalies (short keys, coded values without ids, out-of-range time indices,
``null`` rates) are skipped: the ECB omits rates on weekends and holidays as
a matter of course.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List, Optional

from ecb_rates.errors import EcbParseError
from ecb_rates.schemas import RateObservation

logger = logging.getLogger(__name__)

CURRENCY_DIMENSION = "CURRENCY"
DENOMINATOR_DIMENSION = "CURRENCY_DENOM"
TIME_DIMENSION = "TIME_PERIOD"

SdmxDocument = Mapping[str, Any]


@dataclass(frozen=True)
class _SeriesDimension:
    """A series dimension resolved to its position in the composite key."""

    position: int
    values: Sequence[Mapping[str, Any]]

    def code_at(self, key: Sequence[int]) -> Optional[str]:
        if self.position >= len(key):
            return None
        index = key[self.position]
        if index < 0 or index >= len(self.values):
            return None
        value = self.values[index]
        if not isinstance(value, Mapping):
            return None
        code = value.get("id")
        return code if isinstance(code, str) and code else None


def parse_text(raw: str) -> SdmxDocument:
    """Deserialize ``raw`` into an SDMX-JSON document without semantic checks."""

    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise EcbParseError(f"ECB API returned invalid JSON: {exc}") from exc

    if not isinstance(document, Mapping):
        raise EcbParseError("ECB API returned invalid JSON: expected an object at top level")
    return document


def decode(document: SdmxDocument) -> List[RateObservation]:
    """Flatten an SDMX-JSON document into rate observations in encounter order."""

    series_dims, observation_dims = _dimension_lists(document)
    currency = _find_series_dimension(series_dims, CURRENCY_DIMENSION)
    denominator = _find_series_dimension(series_dims, DENOMINATOR_DIMENSION)
    time_labels = _time_labels(observation_dims)

    data_sets = document.get("dataSets")
    if not _is_list(data_sets) or not data_sets:
        return []

    observations: List[RateObservation] = []
    for data_set in data_sets:
        series_map = data_set.get("series") if isinstance(data_set, Mapping) else None
        if not isinstance(series_map, Mapping):
            continue
        for raw_key, series in series_map.items():
            observations.extend(
                _decode_series(raw_key, series, currency, denominator, time_labels)
            )

    logger.debug("Decoded %s observations from SDMX-JSON document", len(observations))
    return observations


def _dimension_lists(
    document: SdmxDocument,
) -> tuple[Sequence[Mapping[str, Any]], Sequence[Mapping[str, Any]]]:
    structure = document.get("structure")
    dimensions = structure.get("dimensions") if isinstance(structure, Mapping) else None
    if not isinstance(dimensions, Mapping):
        raise EcbParseError("Invalid SDMX-JSON: missing structure.dimensions")

    series_dims = dimensions.get("series")
    observation_dims = dimensions.get("observation")
    if not _is_list(series_dims) or not _is_list(observation_dims):
        raise EcbParseError(
            "Invalid SDMX-JSON: structure.dimensions must declare series and observation"
        )
    return series_dims, observation_dims


def _find_series_dimension(
    series_dims: Sequence[Mapping[str, Any]], dimension_id: str
) -> _SeriesDimension:
    for position, dimension in enumerate(series_dims):
        if not isinstance(dimension, Mapping) or dimension.get("id") != dimension_id:
            continue
        values = _dimension_values(dimension, dimension_id)
        return _SeriesDimension(position=position, values=values)

    raise EcbParseError(f"Invalid SDMX-JSON: missing {dimension_id} series dimension")


def _time_labels(observation_dims: Sequence[Mapping[str, Any]]) -> List[Optional[str]]:
    for dimension in observation_dims:
        if not isinstance(dimension, Mapping) or dimension.get("id") != TIME_DIMENSION:
            continue
        values = _dimension_values(dimension, TIME_DIMENSION)
        labels: List[Optional[str]] = []
        for value in values:
            label = value.get("id") if isinstance(value, Mapping) else None
            labels.append(label if isinstance(label, str) and label else None)
        return labels

    raise EcbParseError(f"Invalid SDMX-JSON: missing {TIME_DIMENSION} observation dimension")


def _dimension_values(dimension: Mapping[str, Any], dimension_id: str) -> Sequence[Any]:
    values = dimension.get("values")
    if not _is_list(values):
        raise EcbParseError(f"Invalid SDMX-JSON: missing dimension values for {dimension_id}")
    return values


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _parse_key(raw_key: str) -> Optional[List[int]]:
    try:
        return [int(segment) for segment in str(raw_key).split(":")]
    except ValueError:
        return None


def _decode_series(
    raw_key: str,
    series: Any,
    currency: _SeriesDimension,
    denominator: _SeriesDimension,
    time_labels: Sequence[Optional[str]],
) -> Iterator[RateObservation]:
    key = _parse_key(raw_key)
    if key is None or not isinstance(series, Mapping):
        return

    currency_code = currency.code_at(key)
    denominator_code = denominator.code_at(key)
    if currency_code is None or denominator_code is None:
        logger.debug("Skipping SDMX series %s with unresolvable currency codes", raw_key)
        return

    points = series.get("observations")
    if not isinstance(points, Mapping):
        return

    for raw_index, values in points.items():
        try:
            time_index = int(raw_index)
        except (TypeError, ValueError):
            continue
        if time_index < 0 or time_index >= len(time_labels):
            continue
        label = time_labels[time_index]
        if label is None:
            continue
        if not isinstance(values, Sequence) or isinstance(values, str) or not values:
            continue
        rate = values[0]
        if rate is None or isinstance(rate, bool) or not isinstance(rate, int | float):
            continue
        yield RateObservation(
            currency=currency_code,
            base_currency=denominator_code,
            date=label,
            rate=float(rate),
        )
