"""Addition generator with optional no-carry constraint."""
from __future__ import annotations

import logging

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, has_carry, round_to, tidy

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50


class AdditionGenerator(GeneratorContract):
    model_id = "ADDITION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {
                "operand_count": 2,
                "max_value": 20,
                "decimal_places": 0,
                "allow_carrying": False,
                "value_constraints": {"min": 1, "step": 1},
            }
        if year <= 4:
            return {
                "operand_count": 3,
                "max_value": 100,
                "decimal_places": 2 if year == 4 else 0,
                "allow_carrying": True,
                "value_constraints": {"min": 1, "step": 0.01 if year == 4 else 1},
            }
        return {
            "operand_count": 4,
            "max_value": 1000,
            "decimal_places": 2,
            "allow_carrying": True,
            "value_constraints": {"min": 1, "step": 0.01},
        }

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        operands = self._operands(params, source)
        result = tidy(sum(operands), 3)
        running, steps = 0, []
        for op in operands[:-1]:
            running += op
            steps.append(tidy(running, 3))
        return {
            "operation": "ADDITION",
            "operands": operands,
            "result": result,
            "intermediate_steps": steps,
            "has_carrying": has_carry(operands, dp),
            "decimal_formatted": {
                "operands": [format_decimal(op, dp) for op in operands],
                "result": format_decimal(result, dp),
            },
        }

    # ---------------------------------------------------------------

    def _draw(self, params: dict, source: RandomValueSource) -> list:
        """
        One candidate operand set whose total stays within max_value.
        A `fixed_operand` goes first and the rest share what budget remains.
        """
        count = max(1, int(params.get("operand_count", 2)))
        dp = max(0, int(params.get("decimal_places", 0)))
        vc = params.get("value_constraints") or {}
        low = vc.get("min", 1)
        step = vc.get("step", 1)
        budget = params.get("max_value", 20)

        out = []
        if params.get("fixed_operand") is not None:
            out.append(tidy(params["fixed_operand"], max(dp, 2)))
        for i in range(len(out), count):
            still_needed = (count - i - 1) * low
            upper = max(low, round_to(budget - sum(out) - still_needed, max(dp, 3)))
            out.append(source.next(upper, dp, low, step))
        return out

    def _operands(self, params: dict, source: RandomValueSource) -> list:
        dp = max(0, int(params.get("decimal_places", 0)))
        if params.get("allow_carrying", True):
            return self._draw(params, source)

        for _ in range(MAX_ATTEMPTS):
            candidate = self._draw(params, source)
            if not has_carry(candidate, dp):
                return candidate

        # relaxation: carrying may remain, but operands are distinct where possible
        logger.info("[addition._operands] no carry-free set after %d attempts", MAX_ATTEMPTS)
        candidate = self._draw(params, source)
        for _ in range(MAX_ATTEMPTS):
            if len(set(candidate)) == len(candidate):
                break
            candidate = self._draw(params, source)
        return candidate
