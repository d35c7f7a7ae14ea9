"""
Random value source and shared numeric helpers for the generators.

RandomValueSource wraps an injected random.Random so every generator is
deterministic under a seed. Values are quantized to a step grid and never
fall outside [min, max], even after rounding to the requested decimal places.
"""
from __future__ import annotations

import math
import random
from typing import Any, Sequence

# ════════════════════════════════════════════════════════════
# A) Rounding / formatting
# ════════════════════════════════════════════════════════════


def round_to(value: float, places: int = 3) -> float:
    """Round half away from zero (school-maths rounding, not banker's)."""
    factor = 10 ** places
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5 + 1e-9) / factor
    return -rounded if value < 0 else rounded


def tidy(value: float, places: int = 3):
    """Round and collapse whole floats to int (12.0 -> 12)."""
    r = round_to(value, places)
    if float(r).is_integer():
        return int(r)
    return r


def format_decimal(value: float, places: int = 2) -> str:
    """
    Fixed-point format with trailing zeros stripped.

    format_decimal(12.50, 2) -> "12.5"
    format_decimal(7.0, 2)   -> "7"
    """
    text = f"{round_to(value, places):.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_pence(pence: int) -> str:
    """Integer pence as UK money text: 45 -> '45p', 250 -> '£2.50'."""
    pence = int(round(pence))
    if pence >= 100:
        return f"£{pence / 100:.2f}"
    return f"{pence}p"


def format_currency(pounds: float) -> str:
    """Pounds as UK money text: 2.5 -> '£2.50', 0.45 -> '45p'."""
    if pounds >= 1:
        return f"£{round_to(pounds, 2):.2f}"
    return f"{int(round_to(pounds * 100, 0))}p"


def clamp(value, low, high):
    return min(max(value, low), high)


def clamp_year(year: Any) -> int:
    """Coerce any year-ish input into the supported 1..6 bracket."""
    try:
        y = int(year)
    except (TypeError, ValueError):
        return 4
    return clamp(y, 1, 6)


def _places_of(step: float) -> int:
    text = format_decimal(step, 6)
    return len(text.split(".")[1]) if "." in text else 0


# ════════════════════════════════════════════════════════════
# B) Column arithmetic checks
# ════════════════════════════════════════════════════════════


def _to_units(value: float, places: int) -> int:
    return int(round_to(abs(value) * (10 ** places), 0))


def has_carry(operands: Sequence[float], decimal_places: int = 0) -> bool:
    """Check if adding the operands column by column requires carrying."""
    columns = [_to_units(v, decimal_places) for v in operands]
    # the first carrying column is reached before any carry-in exists
    while any(columns):
        if sum(c % 10 for c in columns) >= 10:
            return True
        columns = [c // 10 for c in columns]
    return False


def has_borrow(minuend: float, subtrahend: float, decimal_places: int = 0) -> bool:
    """Check if minuend - subtrahend requires borrowing in any column."""
    a = _to_units(minuend, decimal_places)
    b = _to_units(subtrahend, decimal_places)
    while a or b:
        if a % 10 < b % 10:
            return True
        a //= 10
        b //= 10
    return False


# ════════════════════════════════════════════════════════════
# C) RandomValueSource
# ════════════════════════════════════════════════════════════


class RandomValueSource:
    """Seedable bounded value source used by every generator."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def next(self, max_value: float, decimal_places: int = 0, min_value: float = 0, step: float = 1):
        """
        Value in [min_value, max_value] on the step grid, rounded to
        decimal_places. Inverted bounds collapse to min_value.
        """
        decimal_places = max(0, int(decimal_places or 0))
        if not step or step <= 0:
            step = 1 if decimal_places == 0 else 10 ** -decimal_places
        if max_value < min_value:
            max_value = min_value

        grid_places = max(decimal_places, _places_of(step))
        slots = int(math.floor((max_value - min_value) / step + 1e-9))
        raw = round_to(min_value + self.rng.randint(0, max(slots, 0)) * step, grid_places)
        value = round_to(raw, decimal_places)

        factor = 10 ** decimal_places
        if value > max_value:
            value = math.floor(max_value * factor + 1e-9) / factor
        if value < min_value:
            value = math.ceil(min_value * factor - 1e-9) / factor
        if value > max_value:
            # no grid point inside the interval at this precision
            value = min_value

        if decimal_places == 0 and float(value).is_integer():
            return int(value)
        return value

    def randint(self, low: int, high: int, step: int = 1) -> int:
        """Inclusive integer on a step grid; inverted bounds collapse to low."""
        if high < low:
            return low
        slots = (high - low) // step
        return low + self.rng.randint(0, slots) * step

    def uniform(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def choice(self, items: Sequence):
        return self.rng.choice(list(items))

    def chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def sample(self, items: Sequence, count: int) -> list:
        pool = list(items)
        return self.rng.sample(pool, min(count, len(pool)))
