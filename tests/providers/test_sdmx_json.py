from __future__ import annotations

import json

import pytest

from ecb_rates.errors import EcbParseError
from ecb_rates.providers.sdmx_json import decode, parse_text
from ecb_rates.schemas import RateObservation
from tests.fixtures import (
    EMPTY,
    MULTI_CURRENCY,
    SINGLE_CURRENCY,
    load_json,
    with_data_sets,
    with_series_dimensions,
)


def _series_dims(currency_values=None, denom_values=None):
    return [
        {"id": "FREQ", "name": "Frequency", "values": [{"id": "D", "name": "Daily"}]},
        {
            "id": "CURRENCY",
            "name": "Currency",
            "values": currency_values
            if currency_values is not None
            else [{"id": "USD", "name": "US dollar"}],
        },
        {
            "id": "CURRENCY_DENOM",
            "name": "Denom",
            "values": denom_values if denom_values is not None else [{"id": "EUR", "name": "Euro"}],
        },
        {"id": "EXR_TYPE", "name": "Type", "values": [{"id": "SP00", "name": "Spot"}]},
        {"id": "EXR_SUFFIX", "name": "Suffix", "values": [{"id": "A", "name": "Average"}]},
    ]


def test_decode_single_currency_response():
    observations = decode(load_json(SINGLE_CURRENCY))

    assert observations == [
        RateObservation(currency="USD", base_currency="EUR", date="2025-01-15", rate=1.03),
        RateObservation(currency="USD", base_currency="EUR", date="2025-01-16", rate=1.0303),
    ]


def test_decode_multi_currency_response():
    observations = decode(load_json(MULTI_CURRENCY))

    assert len(observations) == 4
    assert {obs.currency for obs in observations} == {"USD", "GBP"}
    lookup = {(obs.currency, obs.date): obs.rate for obs in observations}
    assert lookup[("USD", "2025-01-15")] == 1.03
    assert lookup[("GBP", "2025-01-15")] == 0.8442
    assert lookup[("GBP", "2025-01-16")] == 0.8451


def test_decode_resolves_dimension_positions_not_declaration_ids():
    document = load_json(MULTI_CURRENCY)
    dims = document["structure"]["dimensions"]["series"]
    # Move CURRENCY_DENOM ahead of CURRENCY; keys follow declaration order.
    reordered = [dims[0], dims[2], dims[1], dims[3], dims[4]]
    document = with_series_dimensions(document, reordered)
    document = with_data_sets(
        document,
        [{"series": {"0:0:1:0:0": {"observations": {"0": [0.8442, 0]}}}}],
    )

    assert decode(document) == [
        RateObservation(currency="GBP", base_currency="EUR", date="2025-01-15", rate=0.8442)
    ]


def test_decode_returns_empty_list_for_empty_data_sets():
    assert decode(load_json(EMPTY)) == []


def test_decode_returns_empty_list_when_data_sets_missing():
    document = load_json(SINGLE_CURRENCY)
    del document["dataSets"]

    assert decode(document) == []


def test_decode_skips_data_sets_without_series():
    document = with_data_sets(load_json(SINGLE_CURRENCY), [{"action": "Replace"}])

    assert decode(document) == []


def test_decode_raises_when_structure_dimensions_missing():
    document = load_json(SINGLE_CURRENCY)
    document["structure"] = {}

    with pytest.raises(EcbParseError, match=r"structure\.dimensions"):
        decode(document)


def test_decode_raises_when_observation_dimensions_missing():
    document = load_json(SINGLE_CURRENCY)
    del document["structure"]["dimensions"]["observation"]

    with pytest.raises(EcbParseError, match=r"structure\.dimensions"):
        decode(document)


def test_decode_raises_for_missing_currency_dimension():
    document = load_json(SINGLE_CURRENCY)
    document["structure"]["dimensions"] = {"series": [], "observation": []}

    with pytest.raises(EcbParseError, match="CURRENCY"):
        decode(document)


def test_decode_raises_for_missing_currency_denom_dimension():
    document = with_series_dimensions(load_json(SINGLE_CURRENCY), _series_dims()[:2])

    with pytest.raises(EcbParseError, match="CURRENCY_DENOM"):
        decode(document)


def test_decode_raises_for_missing_time_period_dimension():
    document = load_json(SINGLE_CURRENCY)
    document["structure"]["dimensions"]["observation"] = [
        {"id": "OTHER_DIM", "name": "Other", "values": []}
    ]

    with pytest.raises(EcbParseError, match="TIME_PERIOD"):
        decode(document)


def test_decode_raises_when_dimension_values_missing():
    dims = _series_dims()
    del dims[1]["values"]
    document = with_series_dimensions(load_json(SINGLE_CURRENCY), dims)

    with pytest.raises(EcbParseError, match="missing dimension values"):
        decode(document)


def test_decode_skips_series_with_too_few_key_indices():
    document = with_data_sets(
        load_json(SINGLE_CURRENCY),
        [{"series": {"0:0": {"attributes": [], "observations": {"0": [1.03]}}}}],
    )

    assert decode(document) == []


def test_decode_skips_series_when_currency_value_has_no_id():
    dims = _series_dims(currency_values=[{"name": "US dollar"}])
    document = with_series_dimensions(load_json(SINGLE_CURRENCY), dims)

    assert decode(document) == []


def test_decode_skips_series_when_denominator_value_has_no_id():
    dims = _series_dims(denom_values=[{"name": "Euro"}])
    document = with_series_dimensions(load_json(SINGLE_CURRENCY), dims)

    assert decode(document) == []


def test_decode_skips_null_rates():
    document = with_data_sets(
        load_json(SINGLE_CURRENCY),
        [
            {
                "series": {
                    "0:0:0:0:0": {
                        "observations": {"0": [None, 0, 0, None, None], "1": [1.0303, 0]}
                    }
                }
            }
        ],
    )

    observations = decode(document)

    assert [obs.date for obs in observations] == ["2025-01-16"]
    assert all(obs.rate > 0 for obs in observations)


def test_decode_skips_out_of_range_time_index():
    document = with_data_sets(
        load_json(SINGLE_CURRENCY),
        [{"series": {"0:0:0:0:0": {"observations": {"99": [1.03, 0]}}}}],
    )

    assert decode(document) == []


def test_decode_handles_empty_observations():
    document = with_data_sets(
        load_json(SINGLE_CURRENCY),
        [{"series": {"0:0:0:0:0": {"attributes": [], "observations": {}}}}],
    )

    assert decode(document) == []


def test_decode_concatenates_data_sets_in_encounter_order():
    document = with_data_sets(
        load_json(SINGLE_CURRENCY),
        [
            {"series": {"0:0:0:0:0": {"observations": {"1": [1.0303, 0]}}}},
            {"series": {"0:0:0:0:0": {"observations": {"0": [1.03, 0]}}}},
        ],
    )

    observations = decode(document)

    assert [(obs.date, obs.rate) for obs in observations] == [
        ("2025-01-16", 1.0303),
        ("2025-01-15", 1.03),
    ]


def test_decode_yields_at_most_series_times_time_indices():
    document = load_json(MULTI_CURRENCY)
    series_count = len(document["dataSets"][0]["series"])
    time_count = len(document["structure"]["dimensions"]["observation"][0]["values"])

    assert len(decode(document)) <= series_count * time_count


def test_parse_text_round_trips_document():
    document = load_json(MULTI_CURRENCY)

    parsed = parse_text(json.dumps(document))

    assert parsed["header"]["id"] == "test-multi"
    assert decode(parsed) == decode(document)


def test_parse_text_rejects_invalid_json():
    with pytest.raises(EcbParseError, match="invalid JSON") as exc_info:
        parse_text("not json")

    assert isinstance(exc_info.value.__cause__, ValueError)


def test_parse_text_rejects_non_object_payload():
    with pytest.raises(EcbParseError):
        parse_text("[1, 2, 3]")


@pytest.mark.parametrize("values", [5, "USD", {"0": {"id": "USD"}}])
def test_decode_raises_when_currency_values_not_a_list(values):
    dims = _series_dims()
    dims[1]["values"] = values
    document = with_series_dimensions(load_json(SINGLE_CURRENCY), dims)

    with pytest.raises(EcbParseError, match="missing dimension values for CURRENCY"):
        decode(document)


@pytest.mark.parametrize("values", [5, "2025-01-15", {"0": {"id": "2025-01-15"}}])
def test_decode_raises_when_time_values_not_a_list(values):
    document = load_json(SINGLE_CURRENCY)
    document["structure"]["dimensions"]["observation"][0]["values"] = values

    with pytest.raises(EcbParseError, match="missing dimension values for TIME_PERIOD"):
        decode(document)


@pytest.mark.parametrize("section", ["series", "observation"])
def test_decode_raises_when_dimension_declaration_not_a_list(section):
    document = load_json(SINGLE_CURRENCY)
    document["structure"]["dimensions"][section] = 7

    with pytest.raises(EcbParseError, match=r"structure\.dimensions"):
        decode(document)


def test_decode_treats_non_list_data_sets_as_empty():
    document = load_json(SINGLE_CURRENCY)
    document["dataSets"] = 3

    assert decode(document) == []
