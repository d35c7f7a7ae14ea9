"""Coin and note recognition generator."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.money import denomination_name, format_denomination, is_note
from app.generators.random_source import RandomValueSource

PROBLEM_TYPES = ("identify_value", "identify_name", "count_collection", "compare_values")


class CoinRecognitionGenerator(GeneratorContract):
    model_id = "COIN_RECOGNITION"

    def default_params(self, year: int) -> dict:
        if year <= 1:
            return {"include_coins": [1, 2, 5, 10], "include_notes": [],
                    "problem_types": ["identify_value", "identify_name"], "max_coin_count": 3,
                    "allow_mixed_denominations": False}
        if year <= 2:
            return {"include_coins": [1, 2, 5, 10, 20], "include_notes": [500],
                    "problem_types": ["identify_value", "count_collection", "compare_values"],
                    "max_coin_count": 5, "allow_mixed_denominations": True}
        return {"include_coins": [1, 2, 5, 10, 20, 50], "include_notes": [500, 1000, 2000],
                "problem_types": ["identify_value", "count_collection", "compare_values"],
                "max_coin_count": 8, "allow_mixed_denominations": True}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        available = list(params.get("include_coins") or []) + list(params.get("include_notes") or [])
        available = sorted(set(available)) or [1]
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["identify_value"])

        if problem in ("identify_value", "identify_name"):
            denom = source.choice(available)
            return {
                "operation": "COIN_RECOGNITION",
                "problem_type": problem,
                "target_denomination": denom,
                "denomination_name": denomination_name(denom),
                "formatted_value": format_denomination(denom),
                "is_note": is_note(denom),
                "collection": [{"denomination": denom, "count": 1}],
                "total_value": denom,
                "answer_type": "value" if problem == "identify_value" else "name",
            }
        if problem == "count_collection":
            return self._count_collection(params, available, source)
        return self._compare(available, source)

    def _count_collection(self, params: dict, available: list, source: RandomValueSource) -> dict:
        collection = []
        if params.get("allow_mixed_denominations") and len(available) > 1:
            picked = source.sample(available, source.randint(2, 3))
            for denom in picked:
                collection.append({"denomination": denom, "count": source.randint(1, 3)})
        else:
            coins = [d for d in available if not is_note(d)] or available
            most = max(2, min(int(params.get("max_coin_count", 3)), 5))
            collection.append({"denomination": source.choice(coins), "count": source.randint(2, most)})
        return {
            "operation": "COIN_RECOGNITION",
            "problem_type": "count_collection",
            "collection": collection,
            "total_value": sum(c["denomination"] * c["count"] for c in collection),
            "answer_type": "total_value",
        }

    def _compare(self, available: list, source: RandomValueSource) -> dict:
        first = source.choice(available)
        others = [d for d in available if d != first]
        second = source.choice(others) if others else first
        if first > second:
            verdict = "first_greater"
        elif first < second:
            verdict = "second_greater"
        else:
            verdict = "equal"
        return {
            "operation": "COIN_RECOGNITION",
            "problem_type": "compare_values",
            "collection": [{"denomination": first, "count": 1}, {"denomination": second, "count": 1}],
            "total_value": max(first, second),
            "comparison_result": verdict,
            "answer_type": "comparison",
        }
