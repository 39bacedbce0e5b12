"""Unit tests for rounding helpers."""
import pytest

from learning.rounding import mean_rounded, percentage, round_half_up, seconds_to_minutes


@pytest.mark.unit
class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (62.5, 63), (0, 0)])
    def test_ties_round_up(self, value, expected):
        assert round_half_up(value) == expected


@pytest.mark.unit
class TestPercentage:
    def test_zero_denominator(self):
        assert percentage(0, 0) == 0
        assert percentage(5, 0) == 0

    @pytest.mark.parametrize(
        "part,whole,expected",
        [(7, 10, 70), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 8, 63), (12, 22, 55), (10, 10, 100)],
    )
    def test_values(self, part, whole, expected):
        assert percentage(part, whole) == expected


@pytest.mark.unit
class TestMeanRounded:
    def test_empty(self):
        assert mean_rounded([]) == 0

    def test_half_rounds_up(self):
        assert mean_rounded([70, 25]) == 48
        assert mean_rounded([60, 61]) == 61

    def test_exact(self):
        assert mean_rounded([80, 90, 100]) == 90


@pytest.mark.unit
class TestSecondsToMinutes:
    def test_values(self):
        assert seconds_to_minutes(0) == 0
        assert seconds_to_minutes(29) == 0
        assert seconds_to_minutes(30) == 1
        assert seconds_to_minutes(89.9) == 1
        assert seconds_to_minutes(90) == 2
