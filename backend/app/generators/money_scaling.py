"""Money scaling generator: scale prices up and down, proportion and rates (amounts in pounds)."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_currency, format_decimal, tidy

PROBLEM_TYPES = ("scale_up", "scale_down", "proportional_reasoning", "rate_problems")
COMMON_FRACTIONAL_FACTORS = [0.5, 0.25, 0.75, 1.5, 2.5, 3.5]
FRACTIONAL_FACTOR_CHANCE = 0.3

SCALE_CONTEXTS = {
    "shopping": ("buying multiple items at the store", "calculating individual item cost from bulk purchase"),
    "bulk_buying": ("ordering in larger quantities", "finding single unit cost from bulk price"),
    "recipe_scaling": ("making a bigger batch of the recipe", "reducing recipe portion size"),
    "group_activities": ("calculating costs for more people", "finding cost per person"),
    "business": ("increasing production volume", "calculating unit production costs"),
    "savings": ("saving for longer periods", "calculating daily saving amounts"),
}
PROPORTION_CONTEXTS = [
    "comparing different package sizes", "calculating costs for different group sizes",
    "finding the better value deal", "determining unit pricing", "scaling recipe costs",
]
RATE_CONTEXTS = {
    "hour": ["hourly wage calculation", "parking fee calculation", "rental cost calculation"],
    "day": ["daily expense planning", "holiday budget calculation", "subscription cost calculation"],
    "week": ["weekly allowance calculation", "weekly shopping budget", "weekly activity costs"],
}


def format_factor(factor: float) -> str:
    return format_decimal(factor, 2)


class MoneyScalingGenerator(GeneratorContract):
    model_id = "MONEY_SCALING"

    def default_params(self, year: int) -> dict:
        if year <= 3:
            return {"base_amount_range": {"min": 5, "max": 50}, "scale_factor_range": {"min": 2, "max": 5},
                    "problem_types": ["scale_up", "scale_down"], "decimal_places": 2,
                    "include_fractional_scaling": False, "context_types": ["shopping", "bulk_buying"]}
        if year <= 4:
            return {"base_amount_range": {"min": 10, "max": 100}, "scale_factor_range": {"min": 2, "max": 10},
                    "problem_types": ["scale_up", "scale_down", "proportional_reasoning"], "decimal_places": 2,
                    "include_fractional_scaling": True,
                    "context_types": ["shopping", "bulk_buying", "recipe_scaling", "group_activities"]}
        return {"base_amount_range": {"min": 10, "max": 500}, "scale_factor_range": {"min": 1.5, "max": 20},
                "problem_types": list(PROBLEM_TYPES), "decimal_places": 2, "include_fractional_scaling": True,
                "context_types": sorted(SCALE_CONTEXTS)}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 2)))
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["scale_up"])
        base = self._base(params, source)

        if problem in ("scale_up", "scale_down"):
            factor = self._factor(params, source)
            scaled = tidy(base * factor, dp)
            kind = source.choice([c for c in params.get("context_types") or [] if c in SCALE_CONTEXTS]
                                 or ["shopping"])
            up_text, down_text = SCALE_CONTEXTS[kind]
            if problem == "scale_up":
                return {
                    "operation": "MONEY_SCALING", "problem_type": problem, "context": up_text,
                    "base_amount": base, "scale_factor": factor, "scaled_amount": scaled,
                    "formatted_base": format_currency(base), "formatted_scaled": format_currency(scaled),
                    "formatted_scale_factor": format_factor(factor),
                    "calculation": f"{format_currency(base)} × {format_factor(factor)} = {format_currency(scaled)}",
                }
            return {
                "operation": "MONEY_SCALING", "problem_type": problem, "context": down_text,
                "base_amount": base, "scale_factor": tidy(1 / factor, 3), "original_amount": scaled,
                "scaled_amount": base, "formatted_base": format_currency(base),
                "formatted_original": format_currency(scaled),
                "formatted_scale_factor": format_factor(tidy(1 / factor, 3)),
                "calculation": f"{format_currency(scaled)} ÷ {format_factor(factor)} = {format_currency(base)}",
            }

        if problem == "proportional_reasoning":
            base_qty = source.randint(2, 10)
            new_qty = source.randint(base_qty + 1, 20)
            unit_cost = tidy(base / base_qty, 2)
            new_amount = tidy(base / base_qty * new_qty, 2)
            return {
                "operation": "MONEY_SCALING", "problem_type": problem,
                "context": source.choice(PROPORTION_CONTEXTS),
                "base_quantity": base_qty, "base_amount": base, "new_quantity": new_qty,
                "new_amount": new_amount, "unit_cost": unit_cost,
                "formatted_base": format_currency(base), "formatted_new": format_currency(new_amount),
                "formatted_unit_cost": format_currency(unit_cost),
                "calculation": (f"{base_qty} items cost {format_currency(base)}, so {new_qty} items cost "
                                f"{format_currency(new_amount)}"),
            }

        unit = source.choice(sorted(RATE_CONTEXTS))
        periods = source.randint(2, 10)
        total = tidy(base * periods, dp)
        return {
            "operation": "MONEY_SCALING", "problem_type": problem, "context": source.choice(RATE_CONTEXTS[unit]),
            "rate": base, "time_amount": periods, "time_unit": unit, "total_amount": total,
            "formatted_rate": format_currency(base), "formatted_total": format_currency(total),
            "calculation": f"{format_currency(base)} per {unit} × {periods} {unit}s = {format_currency(total)}",
        }

    def _base(self, params: dict, source: RandomValueSource) -> float:
        r = params.get("base_amount_range") or {}
        dp = max(0, int(params.get("decimal_places", 2)))
        low = r.get("min", 5)
        return source.next(max(low, r.get("max", 50)), dp, low, 10 ** -dp if dp else 1)

    def _factor(self, params: dict, source: RandomValueSource) -> float:
        r = params.get("scale_factor_range") or {}
        low, high = r.get("min", 2), max(r.get("min", 2), r.get("max", 5))
        fractional = bool(params.get("include_fractional_scaling"))
        if fractional and source.chance(FRACTIONAL_FACTOR_CHANCE):
            fitting = [f for f in COMMON_FRACTIONAL_FACTORS if low <= f <= high]
            if fitting:
                return source.choice(fitting)
        return source.next(high, 1 if fractional else 0, low, 0.1 if fractional else 1)
