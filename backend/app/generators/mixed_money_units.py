"""Mixed pounds-and-pence generator: convert, add, subtract and compare."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

PROBLEM_TYPES = ("convert_units", "add_mixed_units", "subtract_mixed_units", "compare_mixed_amounts")
CONVERSION_TYPES = ("pounds_to_pence", "pence_to_pounds", "mixed_to_decimal")


def format_mixed(pounds: int, pence: int) -> str:
    """(3, 45) -> '£3 and 45p'."""
    if pounds == 0 and pence > 0:
        return f"{pence}p"
    if pence == 0 and pounds > 0:
        return f"£{pounds}"
    if pounds > 0 and pence > 0:
        return f"£{pounds} and {pence}p"
    return "£0"


def to_mixed(total_pence: int) -> dict:
    pounds, pence = divmod(max(0, int(total_pence)), 100)
    return {"pounds": pounds, "pence": pence, "total_decimal": tidy(pounds + pence / 100, 2)}


def _pence(amount: dict) -> int:
    return amount["pounds"] * 100 + amount["pence"]


class MixedMoneyUnitsGenerator(GeneratorContract):
    model_id = "MIXED_MONEY_UNITS"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"pounds_range": {"min": 1, "max": 5}, "pence_range": {"min": 1, "max": 99},
                    "problem_types": ["convert_units", "add_mixed_units"], "max_operands": 2}
        if year <= 3:
            return {"pounds_range": {"min": 1, "max": 20}, "pence_range": {"min": 1, "max": 99},
                    "problem_types": ["convert_units", "add_mixed_units", "subtract_mixed_units"],
                    "max_operands": 3}
        return {"pounds_range": {"min": 1, "max": 100}, "pence_range": {"min": 1, "max": 99},
                "problem_types": list(PROBLEM_TYPES), "max_operands": 4}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["convert_units"])
        if problem == "add_mixed_units":
            return self._add(params, source)
        if problem == "subtract_mixed_units":
            return self._subtract(params, source)
        if problem == "compare_mixed_amounts":
            return self._compare(params, source)
        return self._convert(params, source)

    def _amount(self, params: dict, source: RandomValueSource, pounds_floor: int = 0) -> dict:
        pr = params.get("pounds_range") or {}
        pp = params.get("pence_range") or {}
        lo = int(pr.get("min", 1)) + pounds_floor
        return {"pounds": source.randint(lo, max(lo, int(pr.get("max", 5)))),
                "pence": source.randint(int(pp.get("min", 1)), min(99, int(pp.get("max", 99))))}

    def _convert(self, params: dict, source: RandomValueSource) -> dict:
        kind = source.choice(CONVERSION_TYPES)
        if kind == "pounds_to_pence":
            amount = {"pounds": self._amount(params, source)["pounds"], "pence": 0}
            result, formatted = amount["pounds"] * 100, f"{amount['pounds'] * 100}p"
        elif kind == "pence_to_pounds":
            top = int((params.get("pence_range") or {}).get("max", 99)) + 200
            amount = {"pounds": 0, "pence": source.randint(100, top)}
            result = tidy(amount["pence"] / 100, 2)
            formatted = f"£{result:.2f}"
        else:
            amount = self._amount(params, source)
            result = tidy(_pence(amount) / 100, 2)
            formatted = f"£{result:.2f}"
        return {
            "operation": "MIXED_MONEY_UNITS",
            "problem_type": "convert_units",
            "conversion_type": kind,
            "source_amount": amount,
            "result": result,
            "formatted_source": format_mixed(amount["pounds"], amount["pence"]),
            "formatted_result": formatted,
        }

    def _add(self, params: dict, source: RandomValueSource) -> dict:
        count = source.randint(2, max(2, int(params.get("max_operands", 2))))
        operands = [self._amount(params, source) for _ in range(count)]
        total = to_mixed(sum(_pence(o) for o in operands))
        return {
            "operation": "MIXED_MONEY_UNITS",
            "problem_type": "add_mixed_units",
            "operands": operands,
            "result": total["total_decimal"],
            "result_mixed": total,
            "requires_exchange": sum(o["pence"] for o in operands) >= 100,
            "formatted_operands": [format_mixed(o["pounds"], o["pence"]) for o in operands],
            "formatted_result": format_mixed(total["pounds"], total["pence"]),
        }

    def _subtract(self, params: dict, source: RandomValueSource) -> dict:
        minuend = self._amount(params, source, pounds_floor=2)
        subtrahend = self._amount(params, source)
        subtrahend["pounds"] = min(subtrahend["pounds"], minuend["pounds"])
        if _pence(subtrahend) > _pence(minuend):
            minuend, subtrahend = subtrahend, minuend
        diff = to_mixed(_pence(minuend) - _pence(subtrahend))
        return {
            "operation": "MIXED_MONEY_UNITS",
            "problem_type": "subtract_mixed_units",
            "minuend": minuend,
            "subtrahend": subtrahend,
            "result": diff["total_decimal"],
            "result_mixed": diff,
            "requires_borrowing": minuend["pence"] < subtrahend["pence"],
            "formatted_minuend": format_mixed(minuend["pounds"], minuend["pence"]),
            "formatted_subtrahend": format_mixed(subtrahend["pounds"], subtrahend["pence"]),
            "formatted_result": format_mixed(diff["pounds"], diff["pence"]),
        }

    def _compare(self, params: dict, source: RandomValueSource) -> dict:
        first, second = self._amount(params, source), self._amount(params, source)
        a, b = _pence(first), _pence(second)
        verdict = "greater" if a > b else "less" if a < b else "equal"
        difference = tidy(abs(a - b) / 100, 2)
        return {
            "operation": "MIXED_MONEY_UNITS",
            "problem_type": "compare_mixed_amounts",
            "amount1": first,
            "amount2": second,
            "comparison_result": verdict,
            "difference": difference,
            "formatted_amount1": format_mixed(first["pounds"], first["pence"]),
            "formatted_amount2": format_mixed(second["pounds"], second["pence"]),
            "formatted_difference": f"£{difference:.2f}",
        }
