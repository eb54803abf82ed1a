"""Unit tests for logging helpers."""
import json
import logging

import pytest

from cider_dedup.utils.logger import log_classification, log_debug, safe_json, set_level, shorten


class TestSafeJson:
    def test_long_values_are_clipped(self):
        rendered = json.loads(safe_json({"name": "x" * 500, "count": 3}))
        assert rendered["name"] == "x" * 80 + "..."
        assert rendered["count"] == 3

    def test_total_length_is_capped(self):
        rendered = safe_json(["y" * 100] * 50, max_length=200)
        assert rendered.endswith("... [truncated]")
        assert len(rendered) == 200 + len("... [truncated]")

    def test_non_json_values_use_str(self):
        assert safe_json({"value": {1}}) == '{"value": "{1}"}'

    def test_circular_reference(self):
        data = []
        data.append(data)
        assert safe_json(data) == "<unable to serialize>"


def test_shorten_leaves_non_strings():
    assert shorten(42) == 42
    assert shorten("short") == "short"


class TestLevels:
    def test_debug_suppressed_at_info(self, caplog):
        set_level("INFO")
        with caplog.at_level(logging.INFO, logger="cider-dedup"):
            log_debug("hidden", ref="x")
        assert "hidden" not in caplog.text

    def test_debug_emitted_when_enabled(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="cider-dedup"):
            log_debug("visible", ref="x")
        assert 'visible | Context: {"ref": "x"}' in caplog.text

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            set_level("LOUD")


def test_log_classification(caplog):
    with caplog.at_level(logging.INFO, logger="cider-dedup"):
        log_classification("similar", 0.61111, compared=8)
    assert "Duplicate check: similar" in caplog.text
    assert '"confidence": 0.6111' in caplog.text
