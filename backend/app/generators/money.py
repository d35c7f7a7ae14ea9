"""UK money tables and the greedy / depth-first coin algorithms shared by the money generators.

All amounts are integer pence.
"""
from __future__ import annotations

from typing import Iterable

UK_COINS = [1, 2, 5, 10, 20, 50, 100, 200]
UK_NOTES = [500, 1000, 2000, 5000]
UK_DENOMINATIONS = UK_COINS + UK_NOTES

COIN_NAMES = {
    1: ("penny", "pennies"),
    2: ("two pence", "two pence coins"),
    5: ("five pence", "five pence coins"),
    10: ("ten pence", "ten pence coins"),
    20: ("twenty pence", "twenty pence coins"),
    50: ("fifty pence", "fifty pence coins"),
    100: ("one pound coin", "one pound coins"),
    200: ("two pound coin", "two pound coins"),
    500: ("five pound note", "five pound notes"),
    1000: ("ten pound note", "ten pound notes"),
    2000: ("twenty pound note", "twenty pound notes"),
    5000: ("fifty pound note", "fifty pound notes"),
}

# Enumeration stops after this many combinations.
MAX_ENUMERATED_COMBINATIONS = 10


def format_denomination(pence: int) -> str:
    """200 -> '£2', 50 -> '50p'."""
    if pence >= 100:
        pounds = pence / 100
        return f"£{int(pounds)}" if pounds == int(pounds) else f"£{pounds:.2f}"
    return f"{pence}p"


def format_amount(pence: int) -> str:
    """250 -> '£2.50', 300 -> '£3', 45 -> '45p'."""
    pence = int(pence)
    if pence >= 100:
        pounds, rest = divmod(pence, 100)
        return f"£{pounds}" if rest == 0 else f"£{pounds}.{rest:02d}"
    return f"{pence}p"


def denomination_name(pence: int) -> str:
    return COIN_NAMES.get(pence, ("unknown", "unknown"))[0]


def is_note(pence: int) -> bool:
    return pence >= 500


def coin_total(combination: Iterable[dict]) -> int:
    return sum(c["denomination"] * c["count"] for c in combination)


def coin_count(combination: Iterable[dict]) -> int:
    return sum(c["count"] for c in combination)


def normalize(combination: Iterable[dict]) -> tuple:
    """Order-independent key of a (denomination, count) multiset."""
    return tuple(sorted((c["denomination"], c["count"]) for c in combination if c["count"] > 0))


def greedy_breakdown(amount: int, denominations: Iterable[int], max_coins: int | None = None) -> list[dict] | None:
    """
    Largest-denomination-first decomposition.

    Returns [{"denomination", "count"}, ...] or None if greedy cannot reach
    exactly zero within max_coins (target infeasible for this set).
    """
    remaining = int(amount)
    used = 0
    out = []
    for denom in sorted(set(denominations), reverse=True):
        if denom <= 0 or remaining < denom:
            continue
        count = remaining // denom
        if max_coins is not None and used + count > max_coins:
            # a partial take is still useful when smaller coins can finish the job
            count = max(0, max_coins - used)
        if count > 0:
            out.append({"denomination": denom, "count": count})
            remaining -= denom * count
            used += count
    if remaining != 0:
        return None
    if max_coins is not None and used > max_coins:
        return None
    return out


def enumerate_combinations(amount: int, denominations: Iterable[int],
                           limit: int = MAX_ENUMERATED_COMBINATIONS) -> list[list[dict]]:
    """
    Depth-first search over denominations sorted descending, trying every
    count of the current denomination from the most to zero before recursing.

    The search stops as soon as `limit` combinations have been collected.
    """
    denoms = sorted({d for d in denominations if d > 0}, reverse=True)
    found: list[list[dict]] = []

    def _walk(remaining: int, index: int, current: list[dict]) -> None:
        if len(found) >= limit:
            return
        if remaining == 0:
            if current:
                found.append([
                    {"denomination": c["denomination"], "count": c["count"],
                     "formatted": format_denomination(c["denomination"])}
                    for c in current
                ])
            return
        if index >= len(denoms):
            return
        denom = denoms[index]
        for count in range(remaining // denom, -1, -1):
            step = current + [{"denomination": denom, "count": count}] if count else current
            _walk(remaining - count * denom, index + 1, step)
            if len(found) >= limit:
                return

    _walk(int(amount), 0, [])
    return found
