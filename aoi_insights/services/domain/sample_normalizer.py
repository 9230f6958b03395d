"""
Domain service: normalize raw provider payloads into EnvironmentalSample.

The provider is inconsistent about field names between its real and its
synthetic payloads (``temp`` vs ``temperature``, ``precipitation`` vs
``rainfall``...). Every canonical field is resolved through a fixed
precedence list: canonical name first, then the known aliases.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from aoi_insights.domain.models import EnvironmentalSample

logger = logging.getLogger(__name__)


FIELD_PRECEDENCE: Dict[str, Sequence[str]] = {
    "temperature": ("temperature", "temp", "airTemperature", "air_temperature"),
    "relative_humidity": ("relativeHumidity", "relative_humidity", "rh", "humidity"),
    "rainfall": ("rainfall", "precipitation", "weeklyRainfall", "rain"),
    "wind_speed": ("windSpeed", "wind_speed", "wind"),
    "soil_moisture": ("soilMoisture", "soil_moisture"),
    "canopy_humidity": ("canopyHumidity", "canopy_humidity"),
    "leaf_wetness_hours": ("leafWetnessHours", "wetnessHours", "leafWetness", "leaf_wetness_hours"),
}

RISK_ANALYSIS_KEYS = ("riskAnalysis", "risk_analysis", "risk")
REGION_ID_KEYS = ("regionId", "region_id", "boundaryId")

PROVENANCE_KEYS = ("_source", "source")
SYNTHETIC_SOURCES = frozenset({"mock", "synthetic", "fallback"})

FALLBACK_PROVIDER_SYNTHETIC = "provider_synthetic"
FALLBACK_REDUCED_REQUEST = "reduced_request"


def _first_present(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_float(field: str, value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric provider value for {field}: {value!r}")
        return None


def is_synthetic(raw: Mapping[str, Any]) -> bool:
    """Whether the provider marked this payload as mocked or synthetic."""
    marker = _first_present(raw, PROVENANCE_KEYS)
    return isinstance(marker, str) and marker.strip().lower() in SYNTHETIC_SOURCES


def normalize_sample(
    raw: Mapping[str, Any],
    fallback_reason: Optional[str] = None,
) -> EnvironmentalSample:
    """
    Map a raw provider payload onto the canonical sample shape.

    Provider-specific key names never reach the result. A provenance
    marker flags the sample as a fallback even on a successful call.

    Args:
        raw: Decoded provider JSON object
        fallback_reason: Set by the caller when the payload came from a
            substitute request; a synthetic marker takes precedence

    Returns:
        EnvironmentalSample
    """
    values: Dict[str, Any] = {
        field: _as_float(field, _first_present(raw, keys))
        for field, keys in FIELD_PRECEDENCE.items()
    }

    region_id = _first_present(raw, REGION_ID_KEYS)
    values["region_id"] = str(region_id) if region_id is not None else None
    values["risk_analysis"] = _first_present(raw, RISK_ANALYSIS_KEYS)

    if is_synthetic(raw):
        fallback_reason = FALLBACK_PROVIDER_SYNTHETIC

    return EnvironmentalSample(
        **values,
        is_fallback=fallback_reason is not None,
        fallback_reason=fallback_reason,
    )
