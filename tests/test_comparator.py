"""Tests for tolerance comparison."""

import pytest

from gas_snapshot.comparator import (
    Comparator,
    ToleranceConfig,
    allowed_delta,
    mismatch,
    within_tolerance,
)


class TestWithinTolerance:
    """Tests for the 0.1% tolerance bound."""

    def test_equal_values(self):
        assert within_tolerance(50000, 50000) is True

    @pytest.mark.parametrize("new", [49950, 49999, 50040, 50050])
    def test_inside_bounds(self, new):
        assert within_tolerance(50000, new) is True

    @pytest.mark.parametrize("new", [49949, 50051, 50100, 0])
    def test_outside_bounds(self, new):
        assert within_tolerance(50000, new) is False

    def test_delta_floors(self):
        # 1999 / 1000 floors to 1
        assert allowed_delta(1999) == 1
        assert within_tolerance(1999, 2000) is True
        assert within_tolerance(1999, 2001) is False

    def test_small_old_value_is_exact(self):
        """Below 1000 the allowed delta is zero."""
        assert allowed_delta(999) == 0
        assert within_tolerance(999, 999) is True
        assert within_tolerance(999, 1000) is False
        assert within_tolerance(999, 998) is False

    def test_zero_baseline(self):
        assert within_tolerance(0, 0) is True
        assert within_tolerance(0, 1) is False

    def test_tolerance_relative_to_old_value(self):
        # 0.1% of 100000 is 100, 0.1% of 100100 would be 100 as well, of 101000 is 101
        assert within_tolerance(100000, 100100) is True
        assert within_tolerance(100100, 100000) is True
        assert within_tolerance(101000, 100899) is True
        assert within_tolerance(100000, 101000) is False

    def test_lower_bound_saturates(self):
        """A tolerance wider than the baseline clamps the lower bound to zero."""
        wide = ToleranceConfig(numerator=2, denominator=1)
        assert allowed_delta(10, wide) == 20
        assert within_tolerance(10, 0, wide) is True
        assert within_tolerance(10, 30, wide) is True
        assert within_tolerance(10, 31, wide) is False

    def test_huge_values(self):
        old = 2**256 - 1
        delta = old // 1000
        assert within_tolerance(old, old + delta) is True
        assert within_tolerance(old, old + delta + 1) is False
        assert within_tolerance(old, old - delta - 1) is False


class TestMismatch:
    """Tests for mismatch information."""

    def test_signed_delta(self):
        info = mismatch(50000, 50100)
        assert info.old == 50000
        assert info.new == 50100
        assert info.delta == 100
        assert info.allowed_delta == 50

    def test_negative_delta(self):
        assert mismatch(50000, 49000).delta == -1000


class TestComparator:
    """Tests for Comparator results."""

    def test_match(self):
        result = Comparator().compare(50000, 50040)
        assert result.match is True
        assert result.delta == 40
        assert result.allowed_delta == 50
        assert result.error_message is None

    def test_no_match(self):
        result = Comparator().compare(50000, 50100)
        assert result.match is False
        assert result.delta == 100
        assert "50100" in result.error_message
        assert "+100" in result.error_message

    def test_custom_tolerance(self):
        comparator = Comparator(ToleranceConfig(numerator=1, denominator=100))
        assert comparator.compare(50000, 50500).match is True
        assert comparator.compare(50000, 50501).match is False

    @pytest.mark.parametrize("numerator,denominator", [(-1, 1000), (1, 0)])
    def test_invalid_tolerance(self, numerator, denominator):
        with pytest.raises(ValueError):
            ToleranceConfig(numerator=numerator, denominator=denominator)
