"""Tests for the sensor line parser."""

import pytest

from soilmon.sensor.parser import (
    ParsedLine,
    parse_line,
    percent_to_raw,
    raw_to_percent,
)


class TestParseLineUnparseable:
    """Lines without a usable number."""

    @pytest.mark.parametrize("line", ["", "   ", "\t\r", "hello world", "%"])
    def test_returns_none(self, line):
        assert parse_line(line) is None


class TestParseLinePercent:
    """Lines carrying a percentage."""

    def test_percent_line(self):
        assert parse_line("67%") == ParsedLine(raw=338, percent=67)

    def test_percent_with_space_before_sign(self):
        assert parse_line("Moisture 45 %") == ParsedLine(
            raw=percent_to_raw(45), percent=45
        )

    def test_percent_wins_over_earlier_integer(self):
        # The percentage rule is tried first, wherever it appears
        result = parse_line("A0=512 moisture=40%")
        assert result.percent == 40
        assert result.raw == 614

    def test_first_percent_is_used(self):
        assert parse_line("20% then 80%").percent == 20

    def test_percent_clamped_to_100(self):
        assert parse_line("150%") == ParsedLine(raw=0, percent=100)

    def test_zero_percent(self):
        assert parse_line("0%") == ParsedLine(raw=1023, percent=0)

    def test_round_trip_within_one(self):
        parsed = parse_line("67%")
        assert abs(raw_to_percent(parsed.raw) - 67) <= 1


class TestParseLineRaw:
    """Lines carrying a raw analog value."""

    def test_bare_number(self):
        assert parse_line("523") == ParsedLine(raw=523, percent=49)

    def test_labelled_number(self):
        assert parse_line("Moisture: 523") == ParsedLine(raw=523, percent=49)

    def test_surrounding_whitespace(self):
        assert parse_line("  523 \r") == ParsedLine(raw=523, percent=49)

    def test_first_number_is_used(self):
        assert parse_line("sensor 1: 800").raw == 1

    def test_negative_clamped_to_zero(self):
        assert parse_line("-20") == ParsedLine(raw=0, percent=100)

    def test_above_range_clamped(self):
        assert parse_line("5000") == ParsedLine(raw=1023, percent=0)

    def test_long_number_uses_first_five_digits(self):
        assert parse_line("1234567").raw == 1023


class TestConversions:
    """Tests for raw/percent conversion rounding."""

    def test_raw_to_percent_endpoints(self):
        assert raw_to_percent(0) == 100
        assert raw_to_percent(1023) == 0

    def test_percent_to_raw_endpoints(self):
        assert percent_to_raw(0) == 1023
        assert percent_to_raw(100) == 0

    def test_halves_round_up(self):
        # (100 - 50) * 1023 / 100 == 511.5
        assert percent_to_raw(50) == 512
