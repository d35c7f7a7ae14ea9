"""Division generator: exact quotients, remainders, or decimal quotients."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, tidy


class DivisionGenerator(GeneratorContract):
    model_id = "DIVISION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"dividend_max": 20, "divisor_max": 5, "decimal_places": 0,
                    "allow_remainder": False, "ensure_whole": True}
        if year <= 4:
            return {"dividend_max": 100, "divisor_max": 10,
                    "decimal_places": 2 if year == 4 else 0,
                    "allow_remainder": year == 4, "ensure_whole": year == 3}
        return {"dividend_max": 1000, "divisor_max": 100, "decimal_places": 3,
                "allow_remainder": True, "ensure_whole": False}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        dividend_max = params.get("dividend_max", 20)
        divisor_max = max(2, int(params.get("divisor_max", 5)))
        allow_remainder = bool(params.get("allow_remainder"))

        if params.get("fixed_dividend") is not None:
            dividend = tidy(params["fixed_dividend"], max(dp, 2))
            divisor = self._divisor_for(dividend, divisor_max, allow_remainder or dp > 0, source)
            if not float(dividend).is_integer() and dp == 0:
                dp = 2
        elif params.get("ensure_whole"):
            # divisor first, dividend built as a multiple so the quotient is exact
            divisor = source.randint(2, divisor_max)
            multiplier = source.randint(1, max(1, int(dividend_max // divisor)))
            dividend = divisor * multiplier
            dp = 0
            allow_remainder = False
        else:
            dividend = source.next(dividend_max, dp, 1, 0.01 if dp > 0 else 1)
            divisor = source.next(divisor_max, 0, 1, 1) or 1
            if not allow_remainder and dp == 0:
                dividend = (dividend // divisor) * divisor or divisor

        if dp > 0:
            quotient = tidy(dividend / divisor, dp)
            remainder = 0
        else:
            quotient = int(dividend // divisor)
            remainder = int(dividend % divisor) if allow_remainder else 0

        return {
            "operation": "DIVISION",
            "dividend": dividend,
            "divisor": divisor,
            "quotient": quotient,
            "remainder": remainder,
            "result": quotient,
            "decimal_formatted": {
                "operands": [format_decimal(dividend, dp), format_decimal(divisor, 0)],
                "quotient": format_decimal(quotient, dp),
                "result": format_decimal(quotient, dp),
            },
        }

    def _divisor_for(self, dividend, divisor_max: int, inexact_ok: bool, source: RandomValueSource) -> int:
        """Divisor for a dividend handed in from an earlier step."""
        if inexact_ok or not float(dividend).is_integer():
            return source.randint(2, divisor_max)
        exact = [d for d in range(2, divisor_max + 1) if int(dividend) % d == 0]
        return source.choice(exact) if exact else 1
