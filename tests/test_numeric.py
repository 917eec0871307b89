"""
Tests for the shared numeric helpers.

CHANGELOG:
- 2026-10-19: Cover NaN and infinite values in aggregates
- 2026-10-19: Initial creation
"""

import math

import pytest

from webmeter.numeric import as_number, max_of, min_of, round_half_up, spread


class TestAsNumber:
    """Output-boundary coercion."""

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, -math.inf])
    def test_non_values_become_zero(self, value: float | None) -> None:
        assert as_number(value) == 0.0

    def test_finite_value_passes_through(self) -> None:
        assert as_number(-0.93) == -0.93


class TestRoundHalfUp:
    """Half-up rounding used for invoice figures."""

    def test_halves_round_up(self) -> None:
        """0.125 rounds to 0.13, unlike the builtin round."""
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(2.5) == 3.0

    def test_regular_rounding(self) -> None:
        assert round_half_up(1234.5678, 2) == 1234.57
        assert round_half_up(39.4) == 39.0


class TestSpread:
    """max - min over present values."""

    def test_ignores_missing(self) -> None:
        assert spread([None, 100.0, None, 140.0]) == 40.0
        assert max_of([None, 3.0, 1.0]) == 3.0
        assert min_of([None, 3.0, 1.0]) == 1.0

    def test_ignores_non_finite(self) -> None:
        assert spread([100.0, math.nan, 140.0, math.inf]) == 40.0
        assert max_of([math.nan, 2.0, -math.inf]) == 2.0
        assert min_of([math.inf, 2.0, math.nan]) == 2.0
        assert max_of([math.nan]) is None
        assert spread([math.nan, math.nan]) == 0.0

    def test_all_missing_is_zero(self) -> None:
        assert spread([]) == 0.0
        assert spread([None, None]) == 0.0
        assert max_of([None]) is None
