"""Coin counting generator: make a target value from coins.

Minimum-coin solutions come from the greedy largest-first algorithm, which is
optimal for the canonical UK coin set. "multiple" mode adds up to three
randomized alternative decompositions.
"""
from __future__ import annotations

import logging

from app.generators.base import GeneratorContract
from app.generators.money import coin_count, format_amount, greedy_breakdown, normalize
from app.generators.random_source import RandomValueSource

logger = logging.getLogger(__name__)

SOLUTION_TYPES = ("exact", "minimum", "multiple")
MAX_ALTERNATIVES = 3
ALTERNATIVE_TRIES = MAX_ALTERNATIVES * 3
FEWER_COINS_CHANCE = 0.4


class CountingGenerator(GeneratorContract):
    model_id = "COUNTING"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"target_value": 50, "allowed_denominations": [1, 2, 5, 10],
                    "solution_type": "exact", "max_coins": 10}
        if year <= 4:
            return {"target_value": 100, "allowed_denominations": [1, 2, 5, 10, 20, 50],
                    "solution_type": "minimum", "max_coins": 15}
        return {"target_value": 500, "allowed_denominations": [1, 2, 5, 10, 20, 50, 100, 200],
                "solution_type": "multiple", "max_coins": 20}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        target = max(1, int(params.get("target_value", 50)))
        denoms = sorted({int(d) for d in params.get("allowed_denominations") or [1] if int(d) > 0},
                        reverse=True) or [1]
        max_coins = max(1, int(params.get("max_coins", 10)))
        mode = params.get("solution_type", "exact")

        solutions = []
        minimum = greedy_breakdown(target, denoms, max_coins)
        if minimum is not None:
            solutions.append({"solution": minimum, "total_coins": coin_count(minimum), "is_minimum": True})

        if mode == "multiple":
            seen = [normalize(s["solution"]) for s in solutions]
            alternatives = 0
            for _ in range(ALTERNATIVE_TRIES):
                if alternatives >= MAX_ALTERNATIVES:
                    break
                alt = self._alternative(target, denoms, max_coins, source)
                if alt is None or normalize(alt) in seen:
                    continue
                seen.append(normalize(alt))
                solutions.append({"solution": alt, "total_coins": coin_count(alt), "is_minimum": False})
                alternatives += 1

        if not solutions:
            logger.info("[counting.build] %dp infeasible with %s, using 1p coins", target, denoms)
            chosen = {"solution": [{"denomination": 1, "count": target}],
                      "total_coins": target, "is_minimum": False}
        elif mode == "minimum":
            chosen = min(solutions, key=lambda s: s["total_coins"])
        else:
            chosen = source.choice(solutions)

        return {
            "operation": "COUNTING",
            "target_value": target,
            "formatted_target": format_amount(target),
            "solutions": chosen["solution"],
            "total_coins": chosen["total_coins"],
            "is_minimum_solution": chosen["is_minimum"],
            "alternatives_found": max(0, len(solutions) - 1),
        }

    def _alternative(self, target: int, denoms: list, max_coins: int, source: RandomValueSource):
        """Greedy walk that sometimes takes fewer of a large coin to force variety."""
        remaining, used, out = target, 0, []
        for i, denom in enumerate(denoms):
            if remaining < denom:
                continue
            most = remaining // denom
            if i < len(denoms) - 1 and source.chance(FEWER_COINS_CHANCE):
                count = int(most * source.uniform(0, 1))
            else:
                count = min(most, max_coins - used)
            if count > 0:
                out.append({"denomination": denom, "count": count})
                remaining -= denom * count
                used += count
        if remaining == 0 and used <= max_coins:
            return out
        return None
