"""
Multi-step composer.

Runs an ordered sequence of generator calls. A step flagged with
use_previous_result gets the previous step's numeric result threaded into
its params (fixed operand, minuend, multiplicand or dividend). A failing
step never aborts the sequence: its result is replaced by the previous
result (or FALLBACK_RESULT) and the composer carries on.
"""
from __future__ import annotations

import logging
import math

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, round_to, tidy

logger = logging.getLogger(__name__)

FALLBACK_RESULT = 10
MAX_THREADED_MULTIPLIER = 10
MAX_THREADED_DIVISOR = 10


def _step(model: str, params: dict, use_previous: bool) -> dict:
    return {"model": model, "params": params, "use_previous_result": use_previous}


def thread_previous(model: str, params: dict, previous: float) -> dict:
    """Params for a step that consumes the previous step's result."""
    prev = round_to(previous, 2)
    if model == "ADDITION":
        return {**params, "operand_count": 2, "fixed_operand": prev}
    if model == "SUBTRACTION":
        return {**params, "minuend_max": max(prev + 20, params.get("minuend_max", 0)), "fixed_minuend": prev}
    if model == "MULTIPLICATION":
        return {**params, "multiplier_max": min(params.get("multiplier_max", MAX_THREADED_MULTIPLIER),
                                                MAX_THREADED_MULTIPLIER),
                "fixed_multiplicand": prev}
    if model == "DIVISION":
        return {**params, "fixed_dividend": prev,
                "divisor_max": min(max(math.floor(prev / 2), 2), MAX_THREADED_DIVISOR)}
    return dict(params)


def extract_result(model: str, output: dict, previous: float | None) -> tuple[list, float]:
    """(inputs, result) for one step's raw generator output."""
    if model == "ADDITION":
        inputs = list(output.get("operands") or [])
        result = output.get("result") or 0
    elif model == "SUBTRACTION":
        inputs = [output.get("minuend") or 0, output.get("subtrahend") or 0]
        result = output.get("result") or 0
    elif model == "MULTIPLICATION":
        inputs = [output.get("multiplicand") or 0, output.get("multiplier") or 0]
        result = output.get("result") or 0
    elif model == "DIVISION":
        inputs = [output.get("dividend") or 0, output.get("divisor") or 0]
        result = output.get("quotient") or 0
    else:
        inputs = [previous] if previous is not None else []
        result = output.get("result") or output.get("final_result") or 0
    return inputs, tidy(result, 2)


class MultiStepGenerator(GeneratorContract):
    model_id = "MULTI_STEP"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {
                "operation_sequence": [
                    _step("ADDITION", {"operand_count": 2, "max_value": 10, "decimal_places": 0,
                                       "allow_carrying": False, "value_constraints": {"min": 1, "step": 1}}, False),
                    _step("SUBTRACTION", {"minuend_max": 20, "subtrahend_max": 10, "decimal_places": 0,
                                          "allow_borrowing": False, "ensure_positive": True,
                                          "value_constraints": {"step": 1}}, True),
                ],
                "max_steps": 2,
                "intermediate_visibility": True,
            }
        if year <= 4:
            dp = 2 if year == 4 else 0
            step = 0.01 if year == 4 else 1
            return {
                "operation_sequence": [
                    _step("MULTIPLICATION", {"multiplicand_max": 10, "multiplier_max": 5, "decimal_places": dp,
                                             "operand_count": 2, "use_fractions": False}, False),
                    _step("ADDITION", {"operand_count": 2, "max_value": 50, "decimal_places": dp,
                                       "allow_carrying": True, "value_constraints": {"min": 1, "step": step}}, True),
                    _step("SUBTRACTION", {"minuend_max": 100, "subtrahend_max": 50, "decimal_places": dp,
                                          "allow_borrowing": True, "ensure_positive": True,
                                          "value_constraints": {"step": step}}, True),
                ],
                "max_steps": 3,
                "intermediate_visibility": True,
            }
        return {
            "operation_sequence": [
                _step("MULTIPLICATION", {"multiplicand_max": 20, "multiplier_max": 10, "decimal_places": 2,
                                         "operand_count": 2, "use_fractions": False}, False),
                _step("ADDITION", {"operand_count": 2, "max_value": 100, "decimal_places": 2,
                                   "allow_carrying": True, "value_constraints": {"min": 1, "step": 0.01}}, True),
                _step("SUBTRACTION", {"minuend_max": 200, "subtrahend_max": 100, "decimal_places": 2,
                                      "allow_borrowing": True, "ensure_positive": True,
                                      "value_constraints": {"step": 0.01}}, True),
                _step("DIVISION", {"dividend_max": 100, "divisor_max": 10, "decimal_places": 2,
                                   "allow_remainder": False, "ensure_whole": False}, True),
            ],
            "max_steps": 4,
            "intermediate_visibility": True,
        }

    def build(self, params: dict, source: RandomValueSource) -> dict:
        steps = self.run_sequence(params, source)
        return {
            "operation": "MULTI_STEP",
            "steps": steps,
            "final_result": steps[-1]["result"] if steps else 0,
            "intermediate_results": [s["result"] for s in steps[:-1]],
        }

    def run_sequence(self, params: dict, source: RandomValueSource) -> list[dict]:
        # registry imports this module
        from app.generators.registry import UnknownModelError, get_generator

        sequence = list(params.get("operation_sequence") or [])[: int(params.get("max_steps", 4))]
        steps: list[dict] = []
        previous = None

        for number, spec in enumerate(sequence, start=1):
            model = spec.get("model", "")
            try:
                generator = get_generator(model)
            except UnknownModelError:
                logger.warning("[multi_step.run_sequence] unknown model %s, skipping step %d", model, number)
                continue

            try:
                step_params = dict(spec.get("params") or {})
                if spec.get("use_previous_result") and previous is not None:
                    step_params = thread_previous(model, step_params, previous)
                output = generator.generate(step_params, rng=source.rng)
                inputs, result = extract_result(model, output, previous)
            except Exception as e:
                logger.warning("[multi_step.run_sequence] step %d (%s) failed: %s", number, model, e)
                result = previous if previous else FALLBACK_RESULT
                inputs = [result]
            steps.append({"step": number, "operation": model, "inputs": inputs, "result": result})
            previous = result
        return steps
