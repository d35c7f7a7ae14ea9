"""
Tests for random_source.py: rounding, formatting, column checks and the
bounded RandomValueSource. All tests are seeded and fully offline.
"""
import os
import random
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.generators.random_source import (
    RandomValueSource,
    clamp_year,
    format_currency,
    format_decimal,
    format_pence,
    has_borrow,
    has_carry,
    round_to,
    tidy,
)


def _source(seed: int = 7) -> RandomValueSource:
    return RandomValueSource(random.Random(seed))


# ── Rounding / formatting ─────────────────────────────────────────────────────

class TestRounding:
    def test_half_rounds_away_from_zero(self):
        assert round_to(2.5, 0) == 3
        assert round_to(-2.5, 0) == -3

    def test_two_places(self):
        assert round_to(1.005, 2) == 1.01

    def test_tidy_collapses_whole_floats(self):
        assert tidy(12.0) == 12
        assert isinstance(tidy(12.0), int)
        assert tidy(1.2345, 2) == 1.23


class TestFormatting:
    def test_format_decimal_strips_zeros(self):
        assert format_decimal(12.50, 2) == "12.5"
        assert format_decimal(7.0, 2) == "7"
        assert format_decimal(3.14159, 3) == "3.142"

    def test_format_pence(self):
        assert format_pence(45) == "45p"
        assert format_pence(250) == "£2.50"

    def test_format_currency(self):
        assert format_currency(2.5) == "£2.50"
        assert format_currency(0.45) == "45p"

    @pytest.mark.parametrize("raw,expected", [(0, 1), (3, 3), (9, 6), ("5", 5), (None, 4), ("x", 4)])
    def test_clamp_year(self, raw, expected):
        assert clamp_year(raw) == expected


# ── Column checks ─────────────────────────────────────────────────────────────

class TestColumnChecks:
    def test_no_carry(self):
        assert has_carry([12, 7]) is False

    def test_carry_in_units(self):
        assert has_carry([15, 7]) is True

    def test_carry_in_tens(self):
        assert has_carry([50, 60]) is True

    def test_carry_in_decimal_column(self):
        assert has_carry([0.5, 0.6], decimal_places=1) is True
        assert has_carry([0.2, 0.3], decimal_places=1) is False

    def test_borrow(self):
        assert has_borrow(42, 17) is True
        assert has_borrow(47, 12) is False


# ── RandomValueSource ─────────────────────────────────────────────────────────

class TestRandomValueSource:
    def test_values_within_bounds(self):
        src = _source()
        for _ in range(500):
            v = src.next(10, 0, 3, 1)
            assert 3 <= v <= 10
            assert isinstance(v, int)

    def test_decimal_values_on_grid(self):
        src = _source()
        for _ in range(300):
            v = src.next(5, 2, 1, 0.25)
            assert 1 <= v <= 5
            assert round(v * 4, 6) == int(round(v * 4))

    def test_inverted_bounds_collapse_to_min(self):
        assert _source().next(2, 0, 5, 1) == 5

    def test_rounding_never_escapes_max(self):
        src = _source()
        for _ in range(300):
            assert src.next(1.04, 1, 1, 0.01) <= 1.04

    def test_same_seed_same_sequence(self):
        a, b = _source(42), _source(42)
        assert [a.next(100) for _ in range(20)] == [b.next(100) for _ in range(20)]

    def test_randint_step_and_inverted(self):
        src = _source()
        for _ in range(100):
            v = src.randint(5, 50, 5)
            assert v % 5 == 0 and 5 <= v <= 50
        assert src.randint(9, 3) == 9

    def test_sample_caps_at_population(self):
        assert len(_source().sample([1, 2, 3], 10)) == 3
