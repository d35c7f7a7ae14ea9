"""Percentage generator: percent of, increase, decrease, and reverse percentages."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

OPERATION_TYPES = ("of", "increase", "decrease", "reverse")
MIN_BASE_VALUE = 10


class PercentageGenerator(GeneratorContract):
    model_id = "PERCENTAGE"

    def default_params(self, year: int) -> dict:
        if year <= 4:
            return {"base_value_max": 100, "percentage_values": [10, 50, 100],
                    "operation_types": ["of"], "decimal_places": 0}
        if year == 5:
            return {"base_value_max": 200, "percentage_values": [10, 20, 25, 50, 75],
                    "operation_types": ["of", "increase", "decrease"], "decimal_places": 2}
        return {"base_value_max": 500,
                "percentage_values": [5, 10, 15, 20, 25, 30, 40, 50, 60, 75, 80],
                "operation_types": list(OPERATION_TYPES), "decimal_places": 2}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        base = source.next(max(params.get("base_value_max", 100), MIN_BASE_VALUE), dp,
                           MIN_BASE_VALUE, 0.01 if dp > 0 else 1)

        op = params.get("operation_type")
        if op not in OPERATION_TYPES:
            choices = [o for o in params.get("operation_types") or ["of"] if o in OPERATION_TYPES]
            op = source.choice(choices or ["of"])

        pool = list(params.get("percentage_values") or [50])
        if op == "reverse":
            # 100% or more off leaves nothing to reverse from
            pool = [p for p in pool if p < 100] or [50]
        percentage = source.choice(pool)

        amount = base * percentage / 100
        if op == "increase":
            result = base + amount
        elif op == "decrease":
            result = base - amount
        elif op == "reverse":
            result = base * 100 / (100 - percentage)
        else:
            result = amount

        return {
            "operation": "PERCENTAGE",
            "operation_type": op,
            "base_value": base,
            "percentage": percentage,
            "percentage_amount": tidy(amount, 2),
            "result": tidy(result, 2),
        }
