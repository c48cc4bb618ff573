"""
test_levels.py - 로그 레벨 테스트
"""

import logging

import pytest

from src.core.levels import (
    LEVEL_SEVERITY,
    LogLevel,
    get_level_severity,
    get_severity_level,
    is_valid_level,
    to_stdlib_level,
)

ORDERED = ["emergency", "alert", "critical", "error", "warning", "notice", "info", "debug"]


class TestLevels:
    """레벨 판정/변환."""

    def test_eight_levels(self):
        assert [level.value for level in LogLevel] == ORDERED
        assert set(LEVEL_SEVERITY) == set(ORDERED)

    def test_strictly_decreasing_severity(self):
        """emergency > alert > ... > debug."""
        severities = [get_level_severity(name) for name in ORDERED]
        assert severities == sorted(severities, reverse=True)
        assert len(set(severities)) == len(severities)

    @pytest.mark.parametrize("level", ["warning", "WARNING", " Warning ", LogLevel.WARNING])
    def test_is_valid_level_normalizes(self, level):
        assert is_valid_level(level) is True

    def test_invalid_level(self):
        assert is_valid_level("loud") is False
        assert get_level_severity("loud") == 0

    def test_enum_severity_property(self):
        assert LogLevel.ERROR.severity == 500
        assert LogLevel.DEBUG.severity == 100

    def test_severity_round_trip_lookup(self):
        assert get_severity_level(600) == "critical"
        assert get_severity_level(123) is None

    def test_stdlib_mapping(self):
        assert to_stdlib_level("alert") == logging.CRITICAL
        assert to_stdlib_level("notice") == logging.INFO
        assert to_stdlib_level("debug") == logging.DEBUG
        assert to_stdlib_level("loud") == logging.WARNING
