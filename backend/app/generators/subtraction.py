"""Subtraction generator with optional no-borrow constraint."""
from __future__ import annotations

import logging

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, has_borrow, tidy

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50
MIN_OPERAND = 1


class SubtractionGenerator(GeneratorContract):
    model_id = "SUBTRACTION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {
                "minuend_max": 20,
                "subtrahend_max": 10,
                "decimal_places": 0,
                "allow_borrowing": False,
                "ensure_positive": True,
                "value_constraints": {"step": 1},
            }
        if year <= 4:
            return {
                "minuend_max": 100,
                "subtrahend_max": 100,
                "decimal_places": 2 if year == 4 else 0,
                "allow_borrowing": True,
                "ensure_positive": True,
                "value_constraints": {"step": 0.01 if year == 4 else 1},
            }
        return {
            "minuend_max": 1000,
            "subtrahend_max": 1000,
            "decimal_places": 3,
            "allow_borrowing": True,
            "ensure_positive": True,
            "value_constraints": {"step": 0.001},
        }

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        minuend, subtrahend = self._operands(params, source)
        result = tidy(minuend - subtrahend, 3)
        return {
            "operation": "SUBTRACTION",
            "minuend": minuend,
            "subtrahend": subtrahend,
            "result": result,
            "has_borrowing": has_borrow(minuend, subtrahend, dp),
            "decimal_formatted": {
                "minuend": format_decimal(minuend, dp),
                "subtrahend": format_decimal(subtrahend, dp),
                "result": format_decimal(result, dp),
            },
        }

    def _pair(self, params: dict, source: RandomValueSource, subtrahend_cap=None) -> tuple:
        dp = max(0, int(params.get("decimal_places", 0)))
        step = (params.get("value_constraints") or {}).get("step", 1)
        minuend = source.next(params.get("minuend_max", 20), dp, MIN_OPERAND, step)
        cap = params.get("subtrahend_max", 10)
        if subtrahend_cap is not None:
            cap = min(cap, subtrahend_cap)
        subtrahend = source.next(cap, dp, MIN_OPERAND, step)
        if params.get("ensure_positive", True) and subtrahend > minuend:
            minuend, subtrahend = subtrahend, minuend
        return minuend, subtrahend

    def _from_fixed(self, params: dict, source: RandomValueSource) -> tuple:
        dp = max(0, int(params.get("decimal_places", 0)))
        step = (params.get("value_constraints") or {}).get("step", 1)
        minuend = tidy(params["fixed_minuend"], max(dp, 2))
        cap = params.get("subtrahend_max", 10)
        if params.get("ensure_positive", True):
            cap = min(cap, minuend)
        return minuend, source.next(cap, dp, min(MIN_OPERAND, max(cap, 0)), step)

    def _operands(self, params: dict, source: RandomValueSource) -> tuple:
        dp = max(0, int(params.get("decimal_places", 0)))
        if params.get("fixed_minuend") is not None:
            pair = self._from_fixed(params, source)
            for _ in range(MAX_ATTEMPTS):
                if params.get("allow_borrowing", True) or not has_borrow(*pair, dp):
                    break
                pair = self._from_fixed(params, source)
            return pair
        if params.get("allow_borrowing", True):
            return self._pair(params, source)

        for _ in range(MAX_ATTEMPTS):
            minuend, subtrahend = self._pair(params, source)
            if not has_borrow(minuend, subtrahend, dp):
                return minuend, subtrahend

        logger.info("[subtraction._operands] no borrow-free pair after %d attempts", MAX_ATTEMPTS)
        minuend = source.next(params.get("minuend_max", 20), dp, MIN_OPERAND,
                              (params.get("value_constraints") or {}).get("step", 1))
        return self._pair({**params, "minuend_max": minuend}, source, subtrahend_cap=minuend)
