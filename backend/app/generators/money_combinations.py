"""Money combinations generator: the different ways to make an amount."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.money import coin_count, enumerate_combinations, format_amount
from app.generators.random_source import RandomValueSource

PROBLEM_TYPES = ("find_combinations", "make_amount", "equivalent_amounts", "compare_combinations")


class MoneyCombinationsGenerator(GeneratorContract):
    model_id = "MONEY_COMBINATIONS"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"target_amount_range": {"min": 5, "max": 20}, "available_denominations": [1, 2, 5, 10],
                    "problem_types": ["find_combinations", "make_amount"], "max_combinations": 3,
                    "require_exact_combinations": True}
        if year <= 3:
            return {"target_amount_range": {"min": 10, "max": 100},
                    "available_denominations": [1, 2, 5, 10, 20, 50, 100],
                    "problem_types": ["find_combinations", "make_amount", "equivalent_amounts"],
                    "max_combinations": 4, "require_exact_combinations": True}
        return {"target_amount_range": {"min": 25, "max": 500},
                "available_denominations": [1, 2, 5, 10, 20, 50, 100, 200],
                "problem_types": ["find_combinations", "equivalent_amounts", "compare_combinations"],
                "max_combinations": 5, "require_exact_combinations": False}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        denoms = sorted({int(d) for d in params.get("available_denominations") or [1] if int(d) > 0}) or [1]
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["find_combinations"])
        target = self._target(params, denoms, source)
        combos = enumerate_combinations(target, denoms)

        out = {
            "operation": "MONEY_COMBINATIONS",
            "problem_type": problem,
            "target_amount": target,
            "available_denominations": denoms,
            "total_combinations": len(combos),
            "formatted_target": format_amount(target),
        }
        if problem == "make_amount":
            picked = source.choice(combos) if combos else []
            out["combinations"] = [picked] if picked else []
            out["specific_combination"] = picked
        elif problem == "equivalent_amounts":
            out["combinations"] = combos[:3]
        elif problem == "compare_combinations":
            out["combinations"] = sorted(combos, key=coin_count)[:2]
            out["comparison_criteria"] = "fewest_coins"
        else:
            out["combinations"] = combos[:max(1, int(params.get("max_combinations", 3)))]
        return out

    def _target(self, params: dict, denoms: list, source: RandomValueSource) -> int:
        r = params.get("target_amount_range") or {}
        low = max(1, int(r.get("min", 5)))
        high = max(low, int(r.get("max", 20)))
        amount = source.randint(low, high)
        if params.get("require_exact_combinations"):
            smallest = min(denoms)
            amount = max(smallest, int(round(amount / smallest)) * smallest)
        return amount

    def most_efficient(self, amount: int, denominations) -> list:
        """Fewest-coin combination among the enumerated ones."""
        combos = enumerate_combinations(amount, denominations)
        return min(combos, key=coin_count) if combos else []
