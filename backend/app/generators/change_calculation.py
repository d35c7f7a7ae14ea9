"""Change calculation generator: pay for items and work out the change."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.money import UK_DENOMINATIONS, format_amount, format_denomination, greedy_breakdown
from app.generators.random_source import RandomValueSource

PROBLEM_TYPES = ("simple_change", "exact_payment", "multiple_items", "change_breakdown")
COMMON_PAYMENTS = [100, 200, 500, 1000, 2000, 5000]
ITEM_NAMES = ["apple", "book", "pencil", "rubber", "sweet", "toy", "sticker", "card"]
MIN_ITEM_COST = 5


def payment_description(pence: int) -> str:
    if pence >= 500:
        return f"£{pence // 100} note"
    if pence >= 100:
        return f"{format_denomination(pence)} coin"
    return f"{pence}p coin"


def change_breakdown(pence: int) -> list[dict]:
    if pence <= 0:
        return []
    parts = greedy_breakdown(pence, UK_DENOMINATIONS) or []
    return [{**p, "formatted": format_denomination(p["denomination"])} for p in parts]


class ChangeCalculationGenerator(GeneratorContract):
    model_id = "CHANGE_CALCULATION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"max_item_cost": 50, "payment_methods": [100, 200, 500], "max_payment": 500,
                    "decimal_places": 0, "problem_types": ["simple_change", "exact_payment"],
                    "include_breakdown": False, "max_items": 1}
        if year <= 3:
            return {"max_item_cost": 500, "payment_methods": [100, 200, 500, 1000, 2000],
                    "max_payment": 2000, "decimal_places": 2,
                    "problem_types": ["simple_change", "multiple_items", "change_breakdown"],
                    "include_breakdown": True, "max_items": 3}
        return {"max_item_cost": 2000, "payment_methods": [500, 1000, 2000, 5000], "max_payment": 5000,
                "decimal_places": 2, "problem_types": list(PROBLEM_TYPES),
                "include_breakdown": True, "max_items": 5}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["simple_change"])

        if problem == "multiple_items":
            count = source.randint(2, max(2, min(int(params.get("max_items", 2)), 4)))
            items = [{"name": ITEM_NAMES[i % len(ITEM_NAMES)], "cost": self._item_cost(params, source, 0.7),
                      "quantity": 1} for i in range(count)]
        else:
            scale = 0.6 if problem == "change_breakdown" else 1.0
            items = [{"name": "item", "cost": self._item_cost(params, source, scale), "quantity": 1}]

        total = sum(i["cost"] * i["quantity"] for i in items)
        payment = total if problem == "exact_payment" else self.select_payment(params, total, source)
        change = payment - total
        show_breakdown = problem == "change_breakdown" or (
            problem != "exact_payment" and params.get("include_breakdown"))

        return {
            "operation": "CHANGE_CALCULATION",
            "problem_type": problem,
            "items": items,
            "total_cost": total,
            "payment_amount": payment,
            "change_amount": change,
            "change_breakdown": change_breakdown(change) if show_breakdown else [],
            "payment_description": payment_description(payment),
            "formatted": {"total_cost": format_amount(total), "payment_amount": format_amount(payment),
                          "change_amount": format_amount(change)},
        }

    def _item_cost(self, params: dict, source: RandomValueSource, scale: float) -> int:
        top = max(MIN_ITEM_COST, int(params.get("max_item_cost", 50) * scale))
        if int(params.get("decimal_places", 0)) == 0:
            # whole-pence years price in 5p steps
            return source.randint(MIN_ITEM_COST, top - top % 5 or MIN_ITEM_COST, 5)
        return source.randint(MIN_ITEM_COST, top)

    def select_payment(self, params: dict, cost: int, source: RandomValueSource) -> int:
        """
        A payment strictly above cost, nearest to twice the cost, capped by
        the year's max_payment. Falls back to the next common note/coin up,
        then to cost rounded up to the next pound.
        """
        ceiling = params.get("max_payment") or max(COMMON_PAYMENTS)
        options = [p for p in params.get("payment_methods") or [] if cost < p <= ceiling]
        if options:
            target = 2 * cost
            best = min(abs(p - target) for p in options)
            return source.choice([p for p in options if abs(p - target) == best])
        for p in COMMON_PAYMENTS:
            if p > cost:
                return p
        return (cost // 100 + 1) * 100
