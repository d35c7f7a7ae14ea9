"""Linear pattern generator: y = mx + c with a table of evaluated points."""
from __future__ import annotations

import logging

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, tidy

logger = logging.getLogger(__name__)

SLOPE_ATTEMPTS = 50
X_VALUE_ATTEMPTS = 1000


def format_equation(slope, intercept) -> str:
    """
    Human-readable equation.

    format_equation(1, 0)  -> "y = x"
    format_equation(-1, 3) -> "y = -x + 3"
    format_equation(2, -4) -> "y = 2x - 4"
    """
    if slope == 1:
        coefficient = ""
    elif slope == -1:
        coefficient = "-"
    else:
        coefficient = format_decimal(slope, 3)

    if intercept > 0:
        tail = f" + {format_decimal(intercept, 3)}"
    elif intercept < 0:
        tail = f" - {format_decimal(abs(intercept), 3)}"
    else:
        tail = ""
    return f"y = {coefficient}x{tail}"


class LinearEquationGenerator(GeneratorContract):
    model_id = "LINEAR_EQUATION"

    def default_params(self, year: int) -> dict:
        if year <= 3:
            return {
                "slope_range": {"min": 1, "max": 3},
                "intercept_range": {"min": 0, "max": 5},
                "x_range": {"min": 0, "max": 10},
                "decimal_places": 0,
                "allow_negative_slope": False,
                "allow_negative_intercept": False,
                "problem_types": ["evaluate", "complete_table"],
                "x_value_count": 3,
            }
        if year <= 4:
            return {
                "slope_range": {"min": 1, "max": 5},
                "intercept_range": {"min": -5, "max": 10},
                "x_range": {"min": 0, "max": 15},
                "decimal_places": 1,
                "allow_negative_slope": False,
                "allow_negative_intercept": True,
                "problem_types": ["evaluate", "complete_table", "solve_for_y"],
                "x_value_count": 4,
            }
        return {
            "slope_range": {"min": -5, "max": 5},
            "intercept_range": {"min": -10, "max": 10},
            "x_range": {"min": -10, "max": 20},
            "decimal_places": 2,
            "allow_negative_slope": True,
            "allow_negative_intercept": True,
            "problem_types": ["evaluate", "complete_table", "solve_for_y", "solve_for_x"],
            "x_value_count": 5,
        }

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        slope = self._slope(params, source)
        intercept = self._intercept(params, source)
        xs = self._x_values(params, source)
        evaluations = [{"x": x, "y": tidy(slope * x + intercept, dp)} for x in xs]
        problem = source.choice(params.get("problem_types") or ["evaluate"])
        return {
            "operation": "LINEAR_EQUATION",
            "slope": slope,
            "intercept": intercept,
            "equation": format_equation(slope, intercept),
            "problem_type": problem,
            "x_values": xs,
            "evaluations": evaluations,
            "coordinates": [dict(e) for e in evaluations],
            "target_x": source.choice(xs) if problem == "solve_for_x" and xs else None,
            "target_y": source.choice(evaluations)["y"] if problem == "solve_for_y" and evaluations else None,
        }

    def _slope(self, params: dict, source: RandomValueSource):
        dp = max(0, int(params.get("decimal_places", 0)))
        rng = params.get("slope_range") or {}
        low, high = rng.get("min", 1), rng.get("max", 3)
        negatives = params.get("allow_negative_slope", False)
        if not negatives:
            low = max(low, 1)
        fallback = low if low != 0 else 1
        if low >= high:
            return fallback

        for _ in range(SLOPE_ATTEMPTS):
            slope = source.next(high, dp, low)
            if slope != 0 and (negatives or slope > 0):
                return slope
        logger.info("[linear_equation._slope] no non-zero slope after %d attempts", SLOPE_ATTEMPTS)
        return fallback

    def _intercept(self, params: dict, source: RandomValueSource):
        dp = max(0, int(params.get("decimal_places", 0)))
        rng = params.get("intercept_range") or {}
        low, high = rng.get("min", 0), rng.get("max", 5)
        if not params.get("allow_negative_intercept", False):
            low = max(low, 0)
        if low > high:
            return low
        return source.next(high, dp, low)

    def _x_values(self, params: dict, source: RandomValueSource) -> list:
        """Unique integer x values, sorted ascending."""
        rng = params.get("x_range") or {}
        low, high = int(rng.get("min", 0)), int(rng.get("max", 10))
        wanted = max(0, min(int(params.get("x_value_count", 3)), high - low + 1))
        seen: set = set()

        for _ in range(X_VALUE_ATTEMPTS):
            if len(seen) >= wanted:
                break
            seen.add(source.randint(low, high))
        else:
            for x in range(low, high + 1):
                if len(seen) >= wanted:
                    break
                seen.add(x)
        return sorted(seen)
