from __future__ import annotations

from pyconflict._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "reportId": "report-1",
        "ctid": "tenant-1",
        "Authorization": "Bearer abc",
        "nested": {"tenantId": "tenant-2", "countries": "Mali"},
    }

    redacted = redact_for_log(payload)
    assert redacted["reportId"] == "report-1"
    assert redacted["ctid"] == "<redacted>"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["nested"]["tenantId"] == "<redacted>"
    assert redacted["nested"]["countries"] == "Mali"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_truncates_long_lists() -> None:
    redacted = redact_for_log({"items": list(range(30))}, max_items=5)
    assert redacted["items"] == [0, 1, 2, 3, 4, "<+25 more>"]


def test_redact_for_log_masks_tenant_in_embed_url() -> None:
    url = "https://app.powerbi.com/reportEmbed?reportId=r-1&autoAuth=true&ctid=tenant-1"

    assert redact_for_log(url) == "https://app.powerbi.com/reportEmbed?reportId=r-1&autoAuth=true&ctid=<redacted>"


def test_redact_for_log_orders_sets() -> None:
    assert redact_for_log({"countries": frozenset({"Niger", "Mali"})}) == {"countries": ["Mali", "Niger"]}
