"""
Tests for the arithmetic generators: addition, subtraction, multiplication,
division, percentage and fraction.

Every test seeds its own random.Random, so results are reproducible and the
suite runs fully offline.
"""
import os
import random
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.generators.addition import AdditionGenerator
from app.generators.base import merge_params
from app.generators.division import DivisionGenerator
from app.generators.fraction import FractionGenerator
from app.generators.multiplication import MultiplicationGenerator
from app.generators.percentage import PercentageGenerator
from app.generators.random_source import has_borrow, has_carry
from app.generators.subtraction import SubtractionGenerator

SEEDS = range(40)


# ── merge_params ──────────────────────────────────────────────────────────────

class TestMergeParams:
    def test_nested_merge_keeps_sibling_keys(self):
        merged = merge_params({"value_constraints": {"min": 1, "step": 1}}, {"value_constraints": {"min": 5}})
        assert merged["value_constraints"] == {"min": 5, "step": 1}

    def test_defaults_not_mutated(self):
        defaults = {"value_constraints": {"min": 1}}
        merge_params(defaults, {"value_constraints": {"min": 9}})
        assert defaults == {"value_constraints": {"min": 1}}

    def test_caller_params_not_mutated(self):
        params = {"max_value": 10, "year": 2}
        AdditionGenerator().generate(params, rng=random.Random(1))
        assert params == {"max_value": 10, "year": 2}


# ── Addition ──────────────────────────────────────────────────────────────────

class TestAddition:
    def test_year_two_no_carry_within_twenty(self):
        gen = AdditionGenerator()
        params = {"operand_count": 2, "max_value": 20, "decimal_places": 0, "allow_carrying": False}
        for seed in SEEDS:
            out = gen.generate(params, rng=random.Random(seed), year=2)
            assert out["operation"] == "ADDITION"
            assert len(out["operands"]) == 2
            assert sum(out["operands"]) <= 20
            assert out["result"] == sum(out["operands"])
            assert out["has_carrying"] is False
            assert not has_carry(out["operands"])

    def test_operands_respect_min(self):
        gen = AdditionGenerator()
        for seed in SEEDS:
            out = gen.generate({"value_constraints": {"min": 3}}, rng=random.Random(seed), year=5)
            assert all(op >= 3 for op in out["operands"])

    def test_intermediate_steps_are_running_totals(self):
        out = AdditionGenerator().generate({"operand_count": 4}, rng=random.Random(3), year=3)
        ops = out["operands"]
        assert out["intermediate_steps"] == [sum(ops[:1]), sum(ops[:2]), sum(ops[:3])]

    def test_decimal_formatting(self):
        out = AdditionGenerator().generate(rng=random.Random(2), year=4)
        assert len(out["decimal_formatted"]["operands"]) == len(out["operands"])
        assert isinstance(out["decimal_formatted"]["result"], str)

    def test_fixed_operand_first(self):
        out = AdditionGenerator().generate({"fixed_operand": 17, "operand_count": 2, "max_value": 100},
                                           rng=random.Random(4), year=3)
        assert out["operands"][0] == 17
        assert len(out["operands"]) == 2

    def test_same_seed_same_question(self):
        gen = AdditionGenerator()
        assert gen.generate(rng=random.Random(11)) == gen.generate(rng=random.Random(11))


# ── Subtraction ───────────────────────────────────────────────────────────────

class TestSubtraction:
    def test_result_never_negative_when_ensure_positive(self):
        gen = SubtractionGenerator()
        for seed in SEEDS:
            out = gen.generate({"minuend_max": 10, "subtrahend_max": 50}, rng=random.Random(seed), year=3)
            assert out["minuend"] >= out["subtrahend"]
            assert out["result"] >= 0

    def test_no_borrow_when_disallowed(self):
        gen = SubtractionGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=1)
            assert out["has_borrowing"] is False
            assert not has_borrow(out["minuend"], out["subtrahend"])

    def test_result_matches_difference(self):
        out = SubtractionGenerator().generate(rng=random.Random(9), year=6)
        assert out["result"] == pytest.approx(out["minuend"] - out["subtrahend"], abs=1e-3)

    def test_fixed_minuend_caps_subtrahend(self):
        gen = SubtractionGenerator()
        for seed in SEEDS:
            out = gen.generate({"fixed_minuend": 12, "subtrahend_max": 100}, rng=random.Random(seed), year=3)
            assert out["minuend"] == 12
            assert 0 <= out["result"] <= 12


# ── Multiplication ────────────────────────────────────────────────────────────

class TestMultiplication:
    def test_product(self):
        gen = MultiplicationGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=2)
            assert out["result"] == out["multiplicand"] * out["multiplier"]
            assert 1 <= out["multiplicand"] <= 10
            assert 1 <= out["multiplier"] <= 5

    def test_three_factors_in_year_six(self):
        out = MultiplicationGenerator().generate(rng=random.Random(5), year=6)
        assert len(out["factors"]) == 3

    def test_fixed_multiplicand(self):
        out = MultiplicationGenerator().generate({"fixed_multiplicand": 7.5, "multiplier_max": 4},
                                                 rng=random.Random(1), year=3)
        assert out["multiplicand"] == 7.5
        assert out["result"] == pytest.approx(7.5 * out["multiplier"])


# ── Division ──────────────────────────────────────────────────────────────────

class TestDivision:
    def test_ensure_whole_gives_exact_quotient(self):
        gen = DivisionGenerator()
        for seed in SEEDS:
            out = gen.generate({"ensure_whole": True, "dividend_max": 50, "divisor_max": 6},
                               rng=random.Random(seed), year=2)
            assert out["remainder"] == 0
            assert out["dividend"] == out["quotient"] * out["divisor"]
            assert 2 <= out["divisor"] <= 6

    def test_remainder_mode(self):
        gen = DivisionGenerator()
        params = {"ensure_whole": False, "allow_remainder": True, "decimal_places": 0}
        for seed in SEEDS:
            out = gen.generate(params, rng=random.Random(seed), year=4)
            assert out["dividend"] == out["quotient"] * out["divisor"] + out["remainder"]
            assert 0 <= out["remainder"] < out["divisor"]

    def test_decimal_quotient(self):
        out = DivisionGenerator().generate(rng=random.Random(3), year=6)
        assert out["quotient"] == pytest.approx(out["dividend"] / out["divisor"], abs=1e-3)

    def test_fixed_dividend_picks_exact_divisor(self):
        gen = DivisionGenerator()
        for seed in SEEDS:
            out = gen.generate({"fixed_dividend": 24, "divisor_max": 10, "decimal_places": 0,
                                "allow_remainder": False, "ensure_whole": False},
                               rng=random.Random(seed), year=3)
            assert out["dividend"] == 24
            assert 24 % out["divisor"] == 0
            assert out["remainder"] == 0

    def test_fixed_prime_dividend_falls_back_to_one(self):
        out = DivisionGenerator().generate({"fixed_dividend": 13, "divisor_max": 10, "decimal_places": 0,
                                            "allow_remainder": False, "ensure_whole": False},
                                           rng=random.Random(0), year=3)
        assert out["divisor"] == 1
        assert out["quotient"] == 13


# ── Percentage ────────────────────────────────────────────────────────────────

class TestPercentage:
    def test_percent_of(self):
        gen = PercentageGenerator()
        for seed in SEEDS:
            out = gen.generate({"operation_type": "of"}, rng=random.Random(seed), year=4)
            assert out["result"] == pytest.approx(out["base_value"] * out["percentage"] / 100, abs=0.01)

    def test_increase_and_decrease(self):
        gen = PercentageGenerator()
        up = gen.generate({"operation_type": "increase"}, rng=random.Random(1), year=5)
        down = gen.generate({"operation_type": "decrease"}, rng=random.Random(1), year=5)
        assert up["result"] >= up["base_value"]
        assert down["result"] <= down["base_value"]

    def test_reverse_never_uses_hundred_percent(self):
        gen = PercentageGenerator()
        for seed in SEEDS:
            out = gen.generate({"operation_type": "reverse", "percentage_values": [100, 25]},
                               rng=random.Random(seed), year=6)
            assert out["percentage"] == 25
            assert out["result"] * 0.75 == pytest.approx(out["base_value"], abs=0.01)

    def test_base_value_at_least_ten(self):
        gen = PercentageGenerator()
        for seed in SEEDS:
            assert gen.generate({"base_value_max": 5}, rng=random.Random(seed))["base_value"] >= 10


# ── Fraction ──────────────────────────────────────────────────────────────────

class TestFraction:
    def test_whole_results(self):
        gen = FractionGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=2)
            assert out["whole_value"] % out["fraction"]["denominator"] == 0
            assert float(out["result"]).is_integer()

    def test_formatted_fraction(self):
        out = FractionGenerator().generate({"fraction_types": [{"numerator": 3, "denominator": 4}]},
                                           rng=random.Random(2), year=5)
        assert out["fraction"]["formatted"] == "3/4"
        assert out["result"] == pytest.approx(out["whole_value"] * 3 / 4, abs=0.01)
