"""Internal constants shared across the library."""

DEFAULT_DISCOVERY_PREFIX = "homeassistant"

UNIT_CACHE_FILENAME = ".unit_cache_{vin}.json"
STATE_CACHE_FILENAME = ".state_cache_{vin}.json"
STATE_CACHE_UPDATED_KEY = "_cache_updated_at"

# Availability sentinels shared by every discovery config and the publisher.
PAYLOAD_AVAILABLE = "true"
PAYLOAD_NOT_AVAILABLE = "false"

# Upstream unit tokens meaning "no unit" (compared case-insensitively).
PLACEHOLDER_UNITS: frozenset[str] = frozenset({"", "n/a", "na", "xxx"})

# ------------------------------------------------------------------
# Unit conversion factors (metric upstream → imperial companion)
# ------------------------------------------------------------------

KM_TO_MI = 0.621371
KPA_TO_PSI = 0.145038
L_TO_GAL = 0.264172
KM_PER_L_TO_MPG = 2.35215


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9.0 / 5.0 + 32.0


def round1(value: float) -> float:
    """Round half away from zero to one decimal place."""
    scaled = abs(value) * 10.0 + 0.5
    result = int(scaled) / 10.0
    return -result if value < 0 else result
