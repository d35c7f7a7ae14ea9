"""Comparison generator: pick the larger amount or the better unit price."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

COMPARISON_TYPES = ("direct", "unit_rate", "better_value")
PACK_QUANTITIES = [100, 250, 500, 750, 1000, 1500, 2000]
LETTERS = "ABCD"


def option_label(index: int) -> str:
    return LETTERS[index] if index < len(LETTERS) else f"Option {index + 1}"


class ComparisonGenerator(GeneratorContract):
    model_id = "COMPARISON"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"value_counts": [2], "value_max": 50, "comparison_types": ["direct"],
                    "decimal_places": 0, "include_calculation": False}
        if year <= 4:
            return {"value_counts": [2], "value_max": 200, "comparison_types": ["direct", "unit_rate"],
                    "decimal_places": 2, "include_calculation": True}
        return {"value_counts": [2, 3], "value_max": 1000, "comparison_types": list(COMPARISON_TYPES),
                "decimal_places": 2, "include_calculation": True}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        value_max = params.get("value_max", 50)
        kind = params.get("comparison_type")
        if kind not in COMPARISON_TYPES:
            kind = source.choice([c for c in params.get("comparison_types") or [] if c in COMPARISON_TYPES]
                                 or ["direct"])
        count = params.get("value_count") or source.choice(params.get("value_counts") or [2])
        count = max(2, min(int(count), len(LETTERS)))

        quantities = [q for q in PACK_QUANTITIES if q <= value_max * 10] or PACK_QUANTITIES[:1]
        options = []
        for i in range(count):
            value = source.next(value_max, dp, 1, 0.01 if dp > 0 else 1)
            option = {"value": value, "description": f"{option_label(i)}: £{value:.2f}"}
            if kind != "direct":
                option["quantity"] = source.choice(quantities)
                option["unit_rate"] = tidy(value / option["quantity"], 3)
            options.append(option)

        if kind == "direct":
            winner, difference, explanation = self._direct(options, params)
        else:
            winner, difference, explanation = self._unit_rate(options, params)

        return {
            "operation": "COMPARISON",
            "comparison_type": kind,
            "options": options,
            "winner_index": winner,
            "difference": difference,
            "explanation": explanation,
        }

    def _direct(self, options, params):
        winner = max(range(len(options)), key=lambda i: (options[i]["value"], -i))
        ranked = sorted((o["value"] for o in options), reverse=True)
        difference = tidy(ranked[0] - ranked[1], 2)
        best = options[winner]["value"]
        if params.get("include_calculation"):
            explanation = (f"Option {option_label(winner)} has the highest value at £{best:.2f}, "
                           f"which is £{difference:.2f} more than the next highest.")
        else:
            explanation = f"Option {option_label(winner)} is worth more."
        return winner, difference, explanation

    def _unit_rate(self, options, params):
        winner = min(range(len(options)), key=lambda i: (options[i]["unit_rate"], i))
        rates = sorted(o["unit_rate"] for o in options)
        difference = tidy(rates[1] - rates[0], 3)
        best = options[winner]
        if params.get("include_calculation"):
            explanation = (f"Option {option_label(winner)} offers the best value at "
                           f"£{best['unit_rate']:.3f} per unit (£{best['value']:.2f} for "
                           f"{best['quantity']} units).")
        else:
            explanation = f"Option {option_label(winner)} is better value."
        return winner, difference, explanation
