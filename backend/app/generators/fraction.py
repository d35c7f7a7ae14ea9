"""Fraction-of-a-quantity generator."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

MAX_WHOLE_MULTIPLIER = 10


def _fractions(*pairs):
    return [{"numerator": n, "denominator": d} for n, d in pairs]


class FractionGenerator(GeneratorContract):
    model_id = "FRACTION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"whole_value_max": 20, "fraction_types": _fractions((1, 2)),
                    "decimal_places": 0, "ensure_whole_result": True}
        if year <= 4:
            return {"whole_value_max": 100,
                    "fraction_types": _fractions((1, 2), (1, 3), (1, 4), (3, 4)),
                    "decimal_places": 2, "ensure_whole_result": False}
        return {"whole_value_max": 1000,
                "fraction_types": _fractions((1, 2), (1, 3), (2, 3), (1, 4), (3, 4),
                                             (1, 5), (2, 5), (3, 5), (4, 5)),
                "decimal_places": 2, "ensure_whole_result": False}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        kinds = [f for f in params.get("fraction_types") or [] if f.get("denominator")] \
            or _fractions((1, 2))
        whole_max = params.get("whole_value_max", 20)

        if params.get("ensure_whole_result"):
            seed_fraction = source.choice(kinds)
            d = seed_fraction["denominator"]
            k_max = max(1, min(MAX_WHOLE_MULTIPLIER, int(whole_max // d)))
            whole = d * source.randint(1, k_max)
            valid = [f for f in kinds if (whole * f["numerator"]) % f["denominator"] == 0]
            fraction = source.choice(valid) if valid else kinds[0]
        else:
            whole = source.next(whole_max, dp, 1, 0.01 if dp > 0 else 1)
            fraction = source.choice(kinds)

        division = whole / fraction["denominator"]
        final = division * fraction["numerator"]
        return {
            "operation": "FRACTION",
            "whole_value": whole,
            "fraction": {
                "numerator": fraction["numerator"],
                "denominator": fraction["denominator"],
                "formatted": f"{fraction['numerator']}/{fraction['denominator']}",
            },
            "result": tidy(final, dp),
            "calculation_steps": {
                "division_result": tidy(division, dp),
                "final_result": tidy(final, dp),
            },
        }
