"""Multiplication generator (two or more factors)."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, tidy

# Factors after the multiplier stay small.
EXTRA_FACTOR_MAX = 10


class MultiplicationGenerator(GeneratorContract):
    model_id = "MULTIPLICATION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"multiplicand_max": 10, "multiplier_max": 5, "decimal_places": 0,
                    "operand_count": 2, "use_fractions": False}
        if year <= 4:
            return {"multiplicand_max": 100, "multiplier_max": 10,
                    "decimal_places": 2 if year == 4 else 0,
                    "operand_count": 2, "use_fractions": False}
        return {"multiplicand_max": 1000, "multiplier_max": 100, "decimal_places": 3,
                "operand_count": 3 if year == 6 else 2, "use_fractions": year == 6}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        fractional = bool(params.get("use_fractions"))
        count = max(2, int(params.get("operand_count", 2)))

        if params.get("fixed_multiplicand") is not None:
            factors = [tidy(params["fixed_multiplicand"], max(dp, 2))]
        else:
            factors = [source.next(params.get("multiplicand_max", 10), dp if fractional else 0, 1,
                                   0.01 if fractional else 1)]
        for i in range(1, count):
            if i == 1:
                factors.append(source.next(params.get("multiplier_max", 5), dp if fractional else 0, 1,
                                           0.01 if fractional else 1))
            else:
                factors.append(source.next(EXTRA_FACTOR_MAX, 0, 1, 1))

        product = 1
        for f in factors:
            product *= f
        result = tidy(product, 3)
        return {
            "operation": "MULTIPLICATION",
            "multiplicand": factors[0],
            "multiplier": factors[1],
            "factors": factors,
            "result": result,
            "decimal_formatted": {
                "operands": [format_decimal(f, dp) for f in factors],
                "result": format_decimal(result, dp),
            },
        }
