"""
Insights provider endpoint paths and HTTP constants.
"""


class InsightsAPIEndpoints:
    """Insights provider endpoint paths, relative to the configured base URL."""

    INSIGHTS_BASE = "/insights"

    POINT = f"{INSIGHTS_BASE}/point"
    BOUNDARY = f"{INSIGHTS_BASE}/boundary"


class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Status code reported for failures that never got an HTTP response
    TRANSPORT_FAILURE_STATUS = 502
