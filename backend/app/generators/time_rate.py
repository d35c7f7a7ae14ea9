"""Time/rate generator: savings or production accumulating per period."""
from __future__ import annotations

import math

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, tidy

PROBLEM_TYPES = ("time_to_target", "total_after_time", "rate_calculation")
PERIOD_DAYS = {"day": 1, "week": 7, "month": 30, "year": 365}
MAX_PERIODS = 52


def period_name(period: str, count: int = 1) -> str:
    return period if count == 1 else f"{period}s"


def convert_periods(from_period: str, to_period: str, value: float) -> float:
    """Re-express a per-period value in another period (30-day months)."""
    if from_period not in PERIOD_DAYS or to_period not in PERIOD_DAYS:
        return value
    return tidy(value * PERIOD_DAYS[from_period] / PERIOD_DAYS[to_period], 2)


class TimeRateGenerator(GeneratorContract):
    model_id = "TIME_RATE"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"rate_value_max": 10, "rate_periods": ["day"], "target_value_max": 50,
                    "decimal_places": 0, "problem_types": ["total_after_time"]}
        if year <= 4:
            return {"rate_value_max": 50, "rate_periods": ["day", "week"], "target_value_max": 200,
                    "decimal_places": 2, "problem_types": ["time_to_target", "total_after_time"]}
        return {"rate_value_max": 100, "rate_periods": ["week", "month", "year"],
                "target_value_max": 1000, "decimal_places": 2, "problem_types": list(PROBLEM_TYPES)}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 0)))
        step = 0.01 if dp > 0 else 1
        period = params.get("rate_period") or source.choice(params.get("rate_periods") or ["day"])
        problem = params.get("problem_type")
        if problem not in PROBLEM_TYPES:
            problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                    or ["total_after_time"])

        rate = source.next(params.get("rate_value_max", 10), dp, step, step)
        target_max = params.get("target_value_max", 50)

        if problem == "time_to_target":
            total = source.next(max(target_max, rate), dp, rate, step)
            periods = math.ceil(round(total / rate, 9))
        elif problem == "rate_calculation":
            periods = source.randint(2, 21)
            total = tidy(periods * rate, 2)
        else:
            most = max(1, min(int(target_max // rate), MAX_PERIODS))
            periods = source.randint(1, most)
            total = tidy(periods * rate, 2)

        return {
            "operation": "TIME_RATE",
            "problem_type": problem,
            "rate": {"value": rate, "period": period},
            "calculation": {"periods": periods, "total_value": total},
            "period_label": period_name(period, periods),
        }
