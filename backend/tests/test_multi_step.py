"""
Tests for the multi-step composer: result threading between steps and the
failure fallback that keeps a sequence going.
"""
import os
import random
import sys
from unittest.mock import patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.generators.multi_step import (
    FALLBACK_RESULT,
    MultiStepGenerator,
    extract_result,
    thread_previous,
)
from app.generators.multiplication import MultiplicationGenerator


def _step(model, params=None, use_previous=False):
    return {"model": model, "params": params or {}, "use_previous_result": use_previous}


# ── thread_previous ───────────────────────────────────────────────────────────

class TestThreadPrevious:
    def test_addition_fixes_first_operand(self):
        p = thread_previous("ADDITION", {"operand_count": 4}, 12.345)
        assert p["operand_count"] == 2
        assert p["fixed_operand"] == 12.35

    def test_subtraction_raises_minuend_ceiling(self):
        p = thread_previous("SUBTRACTION", {"minuend_max": 10}, 30)
        assert p["fixed_minuend"] == 30
        assert p["minuend_max"] == 50

    def test_multiplication_caps_multiplier(self):
        p = thread_previous("MULTIPLICATION", {"multiplier_max": 100}, 6)
        assert p["multiplier_max"] == 10
        assert p["fixed_multiplicand"] == 6

    def test_division_divisor_from_dividend(self):
        assert thread_previous("DIVISION", {}, 9)["divisor_max"] == 4
        assert thread_previous("DIVISION", {}, 3)["divisor_max"] == 2
        assert thread_previous("DIVISION", {}, 90)["divisor_max"] == 10

    def test_other_models_untouched(self):
        assert thread_previous("PERCENTAGE", {"base_value_max": 50}, 7) == {"base_value_max": 50}


class TestExtractResult:
    def test_division_uses_quotient(self):
        inputs, result = extract_result("DIVISION", {"dividend": 20, "divisor": 4, "quotient": 5}, None)
        assert inputs == [20, 4]
        assert result == 5

    def test_result_rounded_to_two_places(self):
        _, result = extract_result("MULTIPLICATION", {"multiplicand": 1.111, "multiplier": 3, "result": 3.333},
                                   None)
        assert result == 3.33


# ── MultiStepGenerator ────────────────────────────────────────────────────────

class TestMultiStep:
    @pytest.mark.parametrize("year,expected_steps", [(1, 2), (3, 3), (4, 3), (6, 4)])
    def test_default_sequences(self, year, expected_steps):
        out = MultiStepGenerator().generate(rng=random.Random(year), year=year)
        assert out["operation"] == "MULTI_STEP"
        assert len(out["steps"]) == expected_steps
        assert out["final_result"] == out["steps"][-1]["result"]
        assert out["intermediate_results"] == [s["result"] for s in out["steps"][:-1]]

    def test_previous_result_threaded_into_next_step(self):
        for seed in range(20):
            out = MultiStepGenerator().generate(rng=random.Random(seed), year=3)
            first, second, third = out["steps"]
            assert second["inputs"][0] == first["result"]
            assert third["inputs"][0] == second["result"]

    def test_threaded_subtraction_stays_non_negative(self):
        for seed in range(20):
            steps = MultiStepGenerator().generate(rng=random.Random(seed), year=2)["steps"]
            assert steps[1]["result"] >= 0

    def test_max_steps_truncates(self):
        out = MultiStepGenerator().generate({"max_steps": 2}, rng=random.Random(0), year=6)
        assert [s["operation"] for s in out["steps"]] == ["MULTIPLICATION", "ADDITION"]

    def test_unknown_model_skipped(self):
        params = {"operation_sequence": [_step("NOT_A_MODEL"), _step("ADDITION", {"max_value": 10})],
                  "max_steps": 4}
        out = MultiStepGenerator().generate(params, rng=random.Random(0))
        assert len(out["steps"]) == 1
        assert out["steps"][0]["step"] == 2
        assert out["steps"][0]["operation"] == "ADDITION"

    def test_failing_step_uses_fallback_and_continues(self):
        with patch.object(MultiplicationGenerator, "generate", side_effect=RuntimeError("boom")):
            out = MultiStepGenerator().generate(rng=random.Random(0), year=3)
        first, second, _ = out["steps"]
        assert first["result"] == FALLBACK_RESULT
        assert first["inputs"] == [FALLBACK_RESULT]
        assert second["inputs"][0] == FALLBACK_RESULT

    def test_empty_sequence(self):
        out = MultiStepGenerator().generate({"operation_sequence": []}, rng=random.Random(0))
        assert out["steps"] == []
        assert out["final_result"] == 0
