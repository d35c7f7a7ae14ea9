"""Fractions of money amounts (amounts in pounds)."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_currency, tidy

PROBLEM_TYPES = ("fraction_of_amount", "find_whole_from_fraction",
                 "compare_fractional_amounts", "add_fractional_money")

FRACTION_NAMES = {
    (1, 2): "half", (1, 3): "third", (1, 4): "quarter", (1, 5): "fifth", (1, 10): "tenth",
    (2, 3): "two thirds", (3, 4): "three quarters", (2, 5): "two fifths",
    (3, 5): "three fifths", (4, 5): "four fifths",
}


def _fr(n, d):
    return {"numerator": n, "denominator": d}


def fraction_text(fraction: dict) -> str:
    return f"{fraction['numerator']}/{fraction['denominator']}"


def fraction_name(fraction: dict) -> str:
    return FRACTION_NAMES.get((fraction["numerator"], fraction["denominator"]), fraction_text(fraction))


class MoneyFractionsGenerator(GeneratorContract):
    model_id = "MONEY_FRACTIONS"

    def default_params(self, year: int) -> dict:
        if year <= 3:
            return {"amount_range": {"min": 4, "max": 20}, "allowed_fractions": [_fr(1, 2), _fr(1, 4)],
                    "problem_types": ["fraction_of_amount"], "decimal_places": 2,
                    "ensure_whole_results": True}
        if year <= 4:
            return {"amount_range": {"min": 6, "max": 50},
                    "allowed_fractions": [_fr(1, 2), _fr(1, 3), _fr(1, 4), _fr(1, 5), _fr(3, 4)],
                    "problem_types": ["fraction_of_amount", "find_whole_from_fraction"],
                    "decimal_places": 2, "ensure_whole_results": False}
        return {"amount_range": {"min": 10, "max": 100},
                "allowed_fractions": [_fr(1, 2), _fr(1, 3), _fr(1, 4), _fr(1, 5), _fr(1, 10),
                                      _fr(2, 3), _fr(3, 4), _fr(2, 5), _fr(3, 5)],
                "problem_types": list(PROBLEM_TYPES), "decimal_places": 2, "ensure_whole_results": False}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 2)))
        fractions = [f for f in params.get("allowed_fractions") or [] if f.get("denominator")] or [_fr(1, 2)]
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["fraction_of_amount"])

        def part(amount, fraction):
            return tidy(amount * fraction["numerator"] / fraction["denominator"], dp)

        if problem in ("fraction_of_amount", "find_whole_from_fraction"):
            fraction = source.choice(fractions)
            whole = self._whole(params, source, fraction)
            share = part(whole, fraction)
            out = {
                "operation": "MONEY_FRACTIONS",
                "problem_type": problem,
                "whole_amount": whole,
                "fraction": fraction,
                "formatted_whole": format_currency(whole),
                "formatted_fraction": fraction_text(fraction),
                "fraction_name": fraction_name(fraction),
            }
            if problem == "fraction_of_amount":
                out.update(result=share, formatted_result=format_currency(share),
                           calculation_steps=self._steps(whole, fraction, share))
            else:
                out.update(fractional_amount=share, formatted_fractional_amount=format_currency(share),
                           result=whole, formatted_result=format_currency(whole))
            return out

        base = self._whole(params, source)
        first = source.choice(fractions)
        if problem == "compare_fractional_amounts":
            rest = [f for f in fractions if f != first]
            second = source.choice(rest) if rest else first
        else:
            second = source.choice(fractions)
        a, b = part(base, first), part(base, second)
        out = {
            "operation": "MONEY_FRACTIONS",
            "problem_type": problem,
            "base_amount": base,
            "fraction1": first,
            "fraction2": second,
            "amount1": a,
            "amount2": b,
            "formatted_base": format_currency(base),
            "formatted_fraction1": fraction_text(first),
            "formatted_fraction2": fraction_text(second),
            "formatted_amount1": format_currency(a),
            "formatted_amount2": format_currency(b),
        }
        if problem == "compare_fractional_amounts":
            out["comparison_result"] = "first_greater" if a > b else "second_greater" if a < b else "equal"
        else:
            total = tidy(a + b, dp)
            out.update(result=total, formatted_result=format_currency(total))
        return out

    def _whole(self, params: dict, source: RandomValueSource, fraction: dict | None = None) -> int:
        r = params.get("amount_range") or {}
        low = max(1, int(r.get("min", 4)))
        high = max(low, int(r.get("max", 20)))
        amount = source.randint(low, high)
        if params.get("ensure_whole_results") and fraction:
            d = fraction["denominator"]
            if amount % d:
                amount += d - amount % d
            if amount > high:
                amount = high - high % d or d
        return amount

    def _steps(self, whole: float, fraction: dict, result: float) -> list[dict]:
        steps = []
        one_part = whole / fraction["denominator"]
        if fraction["denominator"] != 1:
            steps.append({"step": f"Divide by {fraction['denominator']}",
                          "calculation": f"{format_currency(whole)} ÷ {fraction['denominator']}",
                          "result": format_currency(one_part)})
        if fraction["numerator"] != 1:
            steps.append({"step": f"Multiply by {fraction['numerator']}",
                          "calculation": f"{format_currency(one_part)} × {fraction['numerator']}",
                          "result": format_currency(result)})
        return steps
