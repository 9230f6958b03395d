"""
Unit tests for provider payload normalization.
"""
import pytest

from aoi_insights.services.domain.sample_normalizer import (
    FALLBACK_PROVIDER_SYNTHETIC,
    FALLBACK_REDUCED_REQUEST,
    is_synthetic,
    normalize_sample,
)


class TestFieldPrecedence:
    """Tests for canonical field resolution."""

    def test_alias_names_are_resolved(self):
        """temp/precipitation map onto temperature/rainfall."""
        sample = normalize_sample({"temp": 21.5, "precipitation": 3})

        assert sample.temperature == 21.5
        assert sample.rainfall == 3
        dumped = sample.model_dump(by_alias=True)
        assert "temp" not in dumped
        assert "precipitation" not in dumped
        assert dumped["temperature"] == 21.5
        assert dumped["rainfall"] == 3

    def test_canonical_name_wins_over_alias(self):
        sample = normalize_sample({"temperature": 19.0, "temp": 30.0})

        assert sample.temperature == 19.0

    def test_null_canonical_falls_through_to_alias(self):
        sample = normalize_sample({"rainfall": None, "precipitation": 7.5})

        assert sample.rainfall == 7.5

    def test_all_fields(self, provider_payload):
        sample = normalize_sample({**provider_payload, "riskAnalysis": {"scab": "high"}, "regionId": 42})

        assert sample.relative_humidity == 71.0
        assert sample.wind_speed == 3.1
        assert sample.soil_moisture == 0.27
        assert sample.canopy_humidity == 80.0
        assert sample.leaf_wetness_hours == 9.0
        assert sample.risk_analysis == {"scab": "high"}
        assert sample.region_id == "42"
        assert not sample.is_fallback

    def test_missing_fields_are_none(self):
        sample = normalize_sample({})

        assert sample.temperature is None
        assert sample.leaf_wetness_hours is None

    def test_non_numeric_value_is_dropped(self):
        sample = normalize_sample({"temperature": "warm", "rh": "64"})

        assert sample.temperature is None
        assert sample.relative_humidity == 64.0

    def test_camel_case_serialization(self):
        dumped = normalize_sample({"rh": 60}).model_dump(by_alias=True)

        assert dumped["relativeHumidity"] == 60
        assert dumped["isFallback"] is False


class TestProvenance:
    """Tests for fallback flagging."""

    @pytest.mark.parametrize("payload", [
        {"_source": "mock"},
        {"_source": "MOCK"},
        {"source": "synthetic"},
    ])
    def test_synthetic_marker_sets_fallback(self, payload):
        sample = normalize_sample({**payload, "temp": 10})

        assert is_synthetic(payload)
        assert sample.is_fallback
        assert sample.fallback_reason == FALLBACK_PROVIDER_SYNTHETIC

    def test_real_source_is_not_fallback(self):
        sample = normalize_sample({"_source": "planet", "temp": 10})

        assert not sample.is_fallback
        assert sample.fallback_reason is None

    def test_reduced_request_reason(self):
        sample = normalize_sample({"temp": 10}, fallback_reason=FALLBACK_REDUCED_REQUEST)

        assert sample.is_fallback
        assert sample.fallback_reason == FALLBACK_REDUCED_REQUEST

    def test_equivalent_payloads_give_equal_samples(self, mock_payload):
        assert normalize_sample(dict(mock_payload)) == normalize_sample(dict(mock_payload))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
