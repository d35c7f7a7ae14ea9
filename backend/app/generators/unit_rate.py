"""Unit rate generator: find the rate for one, then scale to a new quantity."""
from __future__ import annotations

import logging

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50

RATE_CONTEXTS = {
    "speed": {"unit": "km/h", "items": ["car", "bike", "bus", "train"]},
    "cost": {"unit": "£/item", "items": ["apple", "book", "pencil", "toy"]},
    "production": {"unit": "items/hour", "items": ["widget", "cake", "bottle", "box"]},
    "consumption": {"unit": "litres/100km", "items": ["car", "van", "truck", "motorbike"]},
    "wage": {"unit": "£/hour", "items": ["job", "work", "position", "role"]},
}

# For these contexts a lower rate is the better deal.
LOWER_IS_BETTER = {"cost", "consumption"}


def _range(params: dict, key: str, low: int, high: int) -> tuple:
    r = params.get(key) or {}
    lo = r.get("min", low)
    return lo, max(lo, r.get("max", high))


class UnitRateGenerator(GeneratorContract):
    model_id = "UNIT_RATE"

    def default_params(self, year: int) -> dict:
        if year <= 3:
            return {"base_quantity_range": {"min": 2, "max": 10}, "base_rate_range": {"min": 10, "max": 50},
                    "target_quantity_range": {"min": 1, "max": 20}, "decimal_places": 0,
                    "problem_types": ["find_unit_rate", "scale_up"],
                    "include_comparisons": False, "comparison_count": 0}
        if year <= 4:
            return {"base_quantity_range": {"min": 2, "max": 20}, "base_rate_range": {"min": 5, "max": 100},
                    "target_quantity_range": {"min": 1, "max": 50}, "decimal_places": 1,
                    "problem_types": ["find_unit_rate", "scale_up", "scale_down"],
                    "include_comparisons": True, "comparison_count": 2}
        return {"base_quantity_range": {"min": 2, "max": 50}, "base_rate_range": {"min": 1, "max": 200},
                "target_quantity_range": {"min": 1, "max": 100}, "decimal_places": 2,
                "problem_types": ["find_unit_rate", "scale_up", "scale_down", "compare_rates", "best_value"],
                "include_comparisons": True, "comparison_count": 3}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        context = params.get("context")
        if context not in RATE_CONTEXTS:
            context = source.choice(sorted(RATE_CONTEXTS))
        data = RATE_CONTEXTS[context]

        q_lo, q_hi = _range(params, "base_quantity_range", 2, 10)
        r_lo, r_hi = _range(params, "base_rate_range", 10, 50)
        base_quantity = max(1, source.next(q_hi, 0, q_lo, 1))
        base_rate = source.next(r_hi, dp, r_lo, 10 ** -dp if dp else 1)
        unit_rate = tidy(base_rate / base_quantity, dp)
        target_quantity = self._target_quantity(params, base_quantity, source)

        return {
            "operation": "UNIT_RATE",
            "context": context,
            "item": source.choice(data["items"]),
            "unit": data["unit"],
            "problem_type": source.choice(params.get("problem_types") or ["find_unit_rate"]),
            "base_quantity": base_quantity,
            "base_rate": base_rate,
            "unit_rate": unit_rate,
            "target_quantity": target_quantity,
            "scaled_value": tidy(unit_rate * target_quantity, dp),
            "comparison_rates": self._comparisons(params, context, unit_rate, source),
        }

    def _target_quantity(self, params: dict, base_quantity: int, source: RandomValueSource) -> int:
        lo, hi = _range(params, "target_quantity_range", 1, 20)
        for _ in range(MAX_ATTEMPTS):
            candidate = source.next(hi, 0, lo, 1)
            if candidate != base_quantity:
                return candidate
        logger.info("[unit_rate._target_quantity] range %s..%s only holds %s", lo, hi, base_quantity)
        fallback = base_quantity + 1
        if fallback > hi:
            fallback = max(lo, base_quantity - 1)
        return fallback

    def _comparisons(self, params: dict, context: str, unit_rate: float, source: RandomValueSource) -> list:
        if not params.get("include_comparisons") or not params.get("comparison_count"):
            return []
        dp = max(0, int(params.get("decimal_places", 0)))
        q_lo, q_hi = _range(params, "base_quantity_range", 2, 10)
        out = []
        for _ in range(int(params["comparison_count"])):
            quantity = max(1, source.next(q_hi, 0, q_lo, 1))
            if source.chance(0.5):
                multiplier = source.next(0.95, 2, 0.7, 0.01)
            else:
                multiplier = source.next(1.4, 2, 1.05, 0.01)
            rate = tidy(unit_rate * quantity * multiplier, dp)
            their_rate = tidy(rate / quantity, dp)
            if context in LOWER_IS_BETTER:
                better = their_rate < unit_rate
            else:
                better = their_rate > unit_rate
            out.append({"quantity": quantity, "rate": rate, "unit_rate": their_rate, "better": better})
        return out
