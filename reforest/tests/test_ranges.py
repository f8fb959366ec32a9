from __future__ import annotations

import math

import pytest

from reforest.data_ingestion.ranges import ParsedRange, format_range, parse_range


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("40-60%", ParsedRange(40.0, 60.0, True)),
        ("6.5–7.5", ParsedRange(6.5, 7.5, True)),
        ("6.5—7.5", ParsedRange(6.5, 7.5, True)),
        ("6.5 − 7.5", ParsedRange(6.5, 7.5, True)),
        ("25°C", ParsedRange(25.0, 25.0, True)),
        ("20 - 30 °c", ParsedRange(20.0, 30.0, True)),
        ("7.5", ParsedRange(7.5, 7.5, True)),
        (7, ParsedRange(7.0, 7.0, True)),
        (6.8, ParsedRange(6.8, 6.8, True)),
        ("1.5e1", ParsedRange(15.0, 15.0, True)),
    ],
)
def test_parse_range_valid_inputs(raw, expected):
    assert parse_range(raw) == expected


def test_parse_range_is_order_independent():
    assert parse_range("60-40") == parse_range("40-60")


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "N/A", "n/a", "abc", "10-20-30", "-", "6.5-", "x-7", float("nan"), math.inf],
)
def test_parse_range_invalid_inputs(raw):
    result = parse_range(raw)
    assert result == ParsedRange(0.0, 0.0, False)


@pytest.mark.parametrize(
    "raw",
    ["", "40-60%", "--", "°C%", "1e999", "—–−", "12-ab", "\t\n", "%%%-%%%", "1.2.3-4"],
)
def test_parse_range_never_raises_and_orders_bounds(raw):
    first = parse_range(raw)
    assert isinstance(first, ParsedRange)
    assert first == parse_range(raw)
    if first.valid:
        assert first.min <= first.max


def test_format_range():
    assert format_range(40, 60, "%") == "40.0-60.0%"
    assert format_range(5.5, 7) == "5.5-7.0"
    assert format_range(-3, 21.25, "°C") == "-3.0-21.2°C"
