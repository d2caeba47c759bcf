from __future__ import annotations

from pycarha._redact import mask_vin, redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "status": "success",
        "access_token": "ABCDEF",
        "password": "pw",
        "nested": {"Authorization": "Bearer x", "value": 1},
    }

    redacted = redact_for_log(payload)
    assert redacted["status"] == "success"
    assert redacted["access_token"] == "<redacted>"
    assert redacted["password"] == "<redacted>"
    assert redacted["nested"]["Authorization"] == "<redacted>"
    assert redacted["nested"]["value"] == 1


def test_redact_for_log_masks_vins() -> None:
    redacted = redact_for_log(
        {
            "vin": "1G1FY6S07N4100000",
            "topic": "homeassistant/sensor/1G1FY6S07N4100000/odometer/state",
        }
    )

    assert redacted["vin"] == "***********100000"
    assert "1G1FY6S07N4100000" not in redacted["topic"]
    assert redacted["topic"].endswith("100000/odometer/state")


def test_mask_vin_short_values() -> None:
    assert mask_vin("XXX") == "***"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
