"""
Difficulty levels: four sub-levels per school year.

A level is written "3.2" (year 3, sub-level 2) and ordered as the decimal
year + (sub_level - 1) / 10, so 1.1 is the easiest and 6.4 the hardest.

  A) DifficultyLevel value type plus create/parse/next/shift helpers
  B) Sub-level parameter tables for the four operations, percentages and
     fractions; params_for_level() falls back to a generator's year
     defaults for anything without a table
  C) validate_transition(): how abrupt a step between two levels is
  D) cognitive_load(): rough working-memory / procedural / conceptual /
     visual demand scores for the four operations
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from app.generators.random_source import clamp, round_to

MIN_YEAR, MAX_YEAR = 1, 6
MIN_SUB_LEVEL, MAX_SUB_LEVEL = 1, 4

# Decimal range of 1.1 .. 6.4 (sub-level 1 sits on the whole year).
MIN_DECIMAL = MIN_YEAR + 0.0
MAX_DECIMAL = MAX_YEAR + (MAX_SUB_LEVEL - 1) / 10
LEVEL_COUNT = (MAX_YEAR - MIN_YEAR + 1) * MAX_SUB_LEVEL

MAX_PARAMETER_INCREASE_PCT = 50
MAX_SIMULTANEOUS_CHANGES = 2


class InvalidLevelError(ValueError):
    pass


# ════════════════════════════════════════════════════════════
# A) DifficultyLevel
# ════════════════════════════════════════════════════════════


@dataclass(frozen=True, order=True)
class DifficultyLevel:
    year: int
    sub_level: int

    @property
    def display_name(self) -> str:
        return f"{self.year}.{self.sub_level}"

    @property
    def decimal(self) -> float:
        return round_to(self.year + (self.sub_level - 1) / 10, 1)

    def to_dict(self) -> dict:
        return {"year": self.year, "sub_level": self.sub_level, "display_name": self.display_name}

    def __str__(self) -> str:
        return self.display_name


def create_level(year: int, sub_level: int) -> DifficultyLevel:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidLevelError(f"Year must be {MIN_YEAR}-{MAX_YEAR}, got {year}")
    if not MIN_SUB_LEVEL <= sub_level <= MAX_SUB_LEVEL:
        raise InvalidLevelError(f"Sub-level must be {MIN_SUB_LEVEL}-{MAX_SUB_LEVEL}, got {sub_level}")
    return DifficultyLevel(year, sub_level)


def parse_level(text: str) -> DifficultyLevel:
    """Parse "3.2" into DifficultyLevel(3, 2)."""
    parts = str(text).strip().split(".")
    if len(parts) != 2:
        raise InvalidLevelError(f'Level must be in format "X.Y", got {text!r}')
    try:
        year, sub_level = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidLevelError(f'Level must be in format "X.Y", got {text!r}') from None
    return create_level(year, sub_level)


def from_decimal(value: float) -> DifficultyLevel:
    value = clamp(round_to(value, 1), MIN_DECIMAL, MAX_DECIMAL)
    year = int(math.floor(value + 1e-9))
    sub_level = int(round_to((value - year) * 10, 0)) + 1
    return DifficultyLevel(year, clamp(sub_level, MIN_SUB_LEVEL, MAX_SUB_LEVEL))


def level_index(level: DifficultyLevel) -> int:
    """Position of a level on the 0..23 ladder (1.1 is 0, 6.4 is 23)."""
    return (level.year - MIN_YEAR) * MAX_SUB_LEVEL + (level.sub_level - MIN_SUB_LEVEL)


def from_index(index: int) -> DifficultyLevel:
    index = clamp(index, 0, LEVEL_COUNT - 1)
    return DifficultyLevel(MIN_YEAR + index // MAX_SUB_LEVEL, MIN_SUB_LEVEL + index % MAX_SUB_LEVEL)


def shift_level(level: DifficultyLevel, delta: float) -> DifficultyLevel:
    """
    Move a level by a decimal amount (+0.1 is one sub-level).

    Steps roll across years in both directions (3.4 + 0.1 is 4.1) and stop
    at 1.1 / 6.4.
    """
    steps = int(round_to(delta * 10, 0))
    return from_index(level_index(level) + steps)


def next_level(level: DifficultyLevel, advancing: bool = True) -> DifficultyLevel:
    """One sub-level up or down, rolling across years and stopping at 1.1 / 6.4."""
    if advancing:
        if level.sub_level < MAX_SUB_LEVEL:
            return create_level(level.year, level.sub_level + 1)
        if level.year < MAX_YEAR:
            return create_level(level.year + 1, MIN_SUB_LEVEL)
        return level
    if level.sub_level > MIN_SUB_LEVEL:
        return create_level(level.year, level.sub_level - 1)
    if level.year > MIN_YEAR:
        return create_level(level.year - 1, MAX_SUB_LEVEL)
    return level


def all_levels() -> list[DifficultyLevel]:
    return [DifficultyLevel(y, s) for y in range(MIN_YEAR, MAX_YEAR + 1)
            for s in range(MIN_SUB_LEVEL, MAX_SUB_LEVEL + 1)]


# ════════════════════════════════════════════════════════════
# B) Sub-level parameter tables
# ════════════════════════════════════════════════════════════

# level: (max_value, operand_count, carrying, number_range, decimal_places)
ADDITION_LEVELS = {
    "1.1": (5, 2, "never", "single-digit", 0),
    "1.2": (8, 2, "never", "single-digit", 0),
    "1.3": (10, 2, "never", "single-digit", 0),
    "1.4": (15, 2, "never", "teen", 0),
    "2.1": (15, 2, "never", "teen", 0),
    "2.2": (18, 2, "never", "two-digit", 0),
    "2.3": (20, 2, "never", "two-digit", 0),
    "2.4": (30, 2, "rare", "two-digit", 0),
    "3.1": (40, 3, "occasional", "two-digit", 0),
    "3.2": (60, 3, "common", "two-digit", 0),
    "3.3": (100, 3, "common", "three-digit", 0),
    "3.4": (150, 3, "always", "three-digit", 0),
    "4.1": (150, 3, "always", "three-digit", 0),
    "4.2": (100, 3, "always", "two-digit", 1),
    "4.3": (100, 3, "always", "two-digit", 2),
    "4.4": (200, 3, "always", "three-digit", 2),
    "5.1": (300, 3, "always", "three-digit", 2),
    "5.2": (500, 4, "always", "three-digit", 2),
    "5.3": (1000, 4, "always", "large", 2),
    "5.4": (1500, 4, "always", "large", 2),
    "6.1": (2000, 4, "always", "large", 2),
    "6.2": (5000, 5, "always", "large", 3),
    "6.3": (10000, 5, "always", "large", 3),
    "6.4": (15000, 5, "always", "large", 3),
}

# Subtraction shares the addition ranges; borrowing follows the carrying column.
SUBTRACTION_LEVELS = {k: (v[0], v[2], v[3], v[4]) for k, v in ADDITION_LEVELS.items()}

# level: (multiplicand_max, multiplier_max, tables, decimal_places, operand_count, use_fractions)
_ALL_TABLES = list(range(1, 11))
MULTIPLICATION_LEVELS = {
    "1.1": (3, 2, [2], 0, 2, False),
    "1.2": (5, 2, [2], 0, 2, False),
    "1.3": (5, 2, [2], 0, 2, False),
    "1.4": (8, 3, [2, 3], 0, 2, False),
    "2.1": (8, 3, [2, 3], 0, 2, False),
    "2.2": (10, 4, [2, 3, 4], 0, 2, False),
    "2.3": (10, 5, [2, 3, 4, 5], 0, 2, False),
    "2.4": (12, 6, [2, 3, 4, 5, 6], 0, 2, False),
    "3.1": (12, 7, [2, 3, 4, 5, 6, 7], 0, 2, False),
    "3.2": (12, 8, [2, 3, 4, 5, 6, 7, 8], 0, 2, False),
    "3.3": (12, 10, _ALL_TABLES, 0, 2, False),
    "3.4": (20, 10, _ALL_TABLES, 0, 2, False),
    "4.1": (30, 10, [], 0, 2, False),
    "4.2": (50, 10, [], 0, 2, False),
    "4.3": (100, 10, [], 0, 2, False),
    "4.4": (150, 12, [], 0, 2, False),
    "5.1": (150, 15, [], 0, 2, False),
    "5.2": (100, 20, [], 1, 2, False),
    "5.3": (100, 100, [], 2, 2, False),
    "5.4": (200, 100, [], 2, 2, False),
    "6.1": (500, 100, [], 2, 2, False),
    "6.2": (800, 100, [], 3, 2, False),
    "6.3": (1000, 100, [], 3, 3, False),
    "6.4": (1500, 150, [], 3, 3, True),
}

# level: (dividend_max, divisor_max, remainder_frequency, decimal_places)
DIVISION_LEVELS = {
    "1.1": (6, 2, "never", 0),
    "1.2": (10, 2, "never", 0),
    "1.3": (10, 2, "never", 0),
    "1.4": (15, 3, "never", 0),
    "2.1": (15, 3, "never", 0),
    "2.2": (20, 4, "never", 0),
    "2.3": (20, 5, "never", 0),
    "2.4": (30, 5, "rare", 0),
    "3.1": (30, 6, "rare", 0),
    "3.2": (50, 8, "occasional", 0),
    "3.3": (100, 10, "never", 0),
    "3.4": (100, 10, "common", 0),
    "4.1": (100, 10, "common", 0),
    "4.2": (150, 12, "always", 0),
    "4.3": (200, 15, "always", 0),
    "4.4": (300, 20, "always", 0),
    "5.1": (300, 20, "always", 0),
    "5.2": (500, 25, "always", 1),
    "5.3": (1000, 100, "always", 2),
    "5.4": (1500, 100, "always", 2),
    "6.1": (2000, 100, "always", 2),
    "6.2": (5000, 100, "always", 3),
    "6.3": (10000, 100, "always", 3),
    "6.4": (15000, 150, "always", 3),
}

# level: (base_value_max, percentage_values, operation, complexity)
PERCENTAGE_LEVELS = {
    "4.1": (50, [50, 100], "of", "simple"),
    "4.2": (80, [25, 50, 75], "of", "simple"),
    "4.3": (100, [10, 50, 100], "of", "simple"),
    "4.4": (120, [10, 20, 25, 50], "of", "standard"),
    "5.1": (150, [10, 20, 25, 50], "of", "standard"),
    "5.2": (180, [10, 20, 25, 50, 75], "of", "standard"),
    "5.3": (200, [10, 20, 25, 50, 75], "of", "standard"),
    "5.4": (250, [5, 10, 15, 20, 25, 30], "mixed", "complex"),
    "6.1": (300, [5, 10, 15, 20, 25, 30, 40], "mixed", "complex"),
    "6.2": (400, [5, 10, 15, 20, 25, 30, 40, 50], "decrease", "complex"),
    "6.3": (500, [5, 10, 15, 20, 25, 30, 40, 50, 75], "decrease", "complex"),
    "6.4": (750, [5, 10, 15, 20, 25, 30, 40, 50, 75, 90], "decrease", "complex"),
}

PERCENTAGE_OPERATIONS = {
    "of": ["of"],
    "decrease": ["decrease"],
    "mixed": ["of", "increase", "decrease"],
}

PERCENTAGE_CONTEXTS = ["money", "measurement", "statistics"]

_F = [(1, 2), (1, 3), (2, 3), (1, 4), (3, 4), (1, 5), (2, 5), (3, 5), (4, 5)]
EXTENDED_FRACTIONS = _F + [(1, 6), (5, 6), (1, 8), (3, 8), (5, 8), (7, 8),
                           (1, 10), (3, 10), (7, 10), (9, 10)]

# level: (whole_value_max, fractions as (numerator, denominator), complexity, numerator_types)
FRACTION_LEVELS = {
    "3.1": (10, [(1, 2)], "basic", "unit"),
    "3.2": (20, [(1, 2)], "basic", "unit"),
    "3.3": (30, [(1, 2), (1, 4)], "basic", "unit"),
    "3.4": (50, [(1, 2), (1, 4), (3, 4)], "common", "simple"),
    "4.1": (60, [(1, 2), (1, 3), (1, 4), (3, 4)], "common", "simple"),
    "4.2": (80, [(1, 2), (1, 3), (1, 4), (3, 4)], "common", "simple"),
    "4.3": (100, [(1, 2), (1, 3), (1, 4), (3, 4)], "common", "simple"),
    "4.4": (150, [(1, 2), (1, 3), (2, 3), (1, 4), (3, 4)], "mixed", "mixed"),
    "5.1": (200, _F[:6], "mixed", "mixed"),
    "5.2": (300, _F[:7], "mixed", "mixed"),
    "5.3": (500, _F[:8], "mixed", "mixed"),
    "5.4": (750, _F, "complex", "mixed"),
    "6.1": (1000, _F, "complex", "mixed"),
    "6.2": (1200, EXTENDED_FRACTIONS, "complex", "mixed"),
    "6.3": (1500, EXTENDED_FRACTIONS, "complex", "improper"),
    "6.4": (2000, EXTENDED_FRACTIONS, "complex", "improper"),
}


def _addition(level: DifficultyLevel) -> dict:
    max_value, operands, carrying, number_range, dp = ADDITION_LEVELS[level.display_name]
    return {
        "operand_count": operands,
        "max_value": max_value,
        "decimal_places": dp,
        "allow_carrying": carrying != "never",
        "value_constraints": {"min": 0.01 if dp else 1, "step": 10 ** -dp if dp else 1},
        "carrying_frequency": carrying,
        "number_range": number_range,
        "visual_support": level.year <= 2,
    }


def _subtraction(level: DifficultyLevel) -> dict:
    max_value, borrowing, number_range, dp = SUBTRACTION_LEVELS[level.display_name]
    return {
        "minuend_max": max_value,
        "subtrahend_max": max_value,
        "decimal_places": dp,
        "allow_borrowing": borrowing != "never",
        "ensure_positive": True,
        "value_constraints": {"step": 10 ** -dp if dp else 1},
        "borrowing_frequency": borrowing,
        "number_range": number_range,
        "visual_support": level.year <= 2,
    }


def _multiplication(level: DifficultyLevel) -> dict:
    multiplicand, multiplier, tables, dp, operands, fractions = MULTIPLICATION_LEVELS[level.display_name]
    return {
        "multiplicand_max": multiplicand,
        "multiplier_max": multiplier,
        "decimal_places": dp,
        "operand_count": operands,
        "use_fractions": fractions,
        "tables_focus": list(tables),
        "conceptual_support": level.year <= 3,
    }


def _division(level: DifficultyLevel) -> dict:
    dividend, divisor, remainder, dp = DIVISION_LEVELS[level.display_name]
    return {
        "dividend_max": dividend,
        "divisor_max": divisor,
        "decimal_places": dp,
        "allow_remainder": remainder != "never",
        "ensure_whole": remainder == "never",
        "remainder_frequency": remainder,
        "visual_support": level.year <= 3,
    }


def _percentage(level: DifficultyLevel) -> dict:
    base_max, values, operation, complexity = PERCENTAGE_LEVELS[level.display_name]
    return {
        "base_value_max": base_max,
        "percentage_values": list(values),
        "operation_types": list(PERCENTAGE_OPERATIONS[operation]),
        "decimal_places": 2 if level.year >= 5 else 0,
        "percentage_complexity": complexity,
        "conceptual_context": PERCENTAGE_CONTEXTS[: math.ceil(level.year / 2)],
        "visual_support": level.year <= 4,
    }


def _fraction(level: DifficultyLevel) -> dict:
    whole_max, fractions, complexity, numerators = FRACTION_LEVELS[level.display_name]
    return {
        "whole_value_max": whole_max,
        "fraction_types": [{"numerator": n, "denominator": d} for n, d in fractions],
        "decimal_places": 2 if level.year >= 4 else 0,
        "ensure_whole_result": level.year <= 3,
        "denominator_complexity": complexity,
        "numerator_types": numerators,
        "visual_support": level.year <= 4,
    }


LEVEL_TABLES = {
    "ADDITION": (ADDITION_LEVELS, _addition),
    "SUBTRACTION": (SUBTRACTION_LEVELS, _subtraction),
    "MULTIPLICATION": (MULTIPLICATION_LEVELS, _multiplication),
    "DIVISION": (DIVISION_LEVELS, _division),
    "PERCENTAGE": (PERCENTAGE_LEVELS, _percentage),
    "FRACTION": (FRACTION_LEVELS, _fraction),
}


def has_level_table(model_id: str, level: DifficultyLevel) -> bool:
    entry = LEVEL_TABLES.get(str(getattr(model_id, "value", model_id)))
    return bool(entry) and level.display_name in entry[0]


def params_for_level(model_id: str, level: DifficultyLevel) -> dict:
    """
    Generator params for a model at a sub-level.

    Models or levels without a sub-level table (e.g. PERCENTAGE below year 4)
    get the generator's own defaults for level.year. Raises
    UnknownModelError for unregistered model ids.
    """
    from app.generators.registry import get_generator

    generator = get_generator(model_id)
    if has_level_table(generator.model_id, level):
        _, build = LEVEL_TABLES[generator.model_id]
        return build(level)
    return generator.default_params(level.year)


# ════════════════════════════════════════════════════════════
# C) Transition validation
# ════════════════════════════════════════════════════════════

NUMERIC_PARAMS = (
    "max_value", "minuend_max", "subtrahend_max", "multiplicand_max", "multiplier_max",
    "dividend_max", "divisor_max", "operand_count", "base_value_max", "whole_value_max",
)


def parameter_increases(from_params: dict, to_params: dict) -> list[dict]:
    """Numeric params that grow between two param sets, with percent increase."""
    out = []
    for name in NUMERIC_PARAMS:
        if name not in from_params or name not in to_params:
            continue
        before, after = from_params[name], to_params[name]
        pct = (after - before) / before * 100 if before > 0 else 0
        if pct > 0:
            out.append({"parameter": name, "from_value": before, "to_value": after,
                        "percent_increase": round_to(pct, 1)})
    return out


def validate_transition(model_id: str, from_level: DifficultyLevel, to_level: DifficultyLevel) -> dict:
    changes = parameter_increases(params_for_level(model_id, from_level),
                                  params_for_level(model_id, to_level))
    max_change = max((c["percent_increase"] for c in changes), default=0)
    simultaneous = len(changes)

    warnings, recommendations = [], []
    if max_change > MAX_PARAMETER_INCREASE_PCT:
        warnings.append(f"Parameter change of {max_change:.1f}% exceeds {MAX_PARAMETER_INCREASE_PCT}% threshold")
        recommendations.append("Consider adding intermediate sub-level")
    if simultaneous > MAX_SIMULTANEOUS_CHANGES:
        warnings.append(f"{simultaneous} parameters changing simultaneously")
        recommendations.append(f"Limit changes to {MAX_SIMULTANEOUS_CHANGES} parameters per level")

    return {
        "is_smooth": max_change <= MAX_PARAMETER_INCREASE_PCT and simultaneous <= MAX_SIMULTANEOUS_CHANGES,
        "max_parameter_change": max_change,
        "simultaneous_changes": simultaneous,
        "cognitive_load_increase": min(100, max_change * simultaneous),
        "changes": changes,
        "warnings": warnings,
        "recommendations": recommendations,
    }


# ════════════════════════════════════════════════════════════
# D) Cognitive load
# ════════════════════════════════════════════════════════════

DEFAULT_COGNITIVE_LOAD = {
    "working_memory_load": 5,
    "procedural_complexity": 5,
    "conceptual_depth": 5,
    "visual_processing": 5,
    "total_load": 50,
}


def _load(working: float, procedural: float, conceptual: float, visual: float) -> dict:
    scores = [min(10, math.ceil(v)) for v in (working, procedural, conceptual, visual)]
    return {
        "working_memory_load": scores[0],
        "procedural_complexity": scores[1],
        "conceptual_depth": scores[2],
        "visual_processing": scores[3],
        "total_load": int(round_to(sum(scores) * 2.5, 0)),
    }


def _log10(value) -> float:
    return math.log10(value) if value and value > 0 else 0


def cognitive_load(model_id: str, params: dict) -> dict:
    """Each component is scored 0..10; total_load is their sum scaled to 0..100."""
    model = str(getattr(model_id, "value", model_id))
    dp = params.get("decimal_places", 0) or 0

    if model == "ADDITION":
        count, top, carry = params.get("operand_count", 2), params.get("max_value", 10), params.get("allow_carrying")
        return _load(count * 2 + (2 if top > 100 else 0),
                     (3 if carry else 1) + (2 if dp > 0 else 0),
                     dp + (2 if carry else 0),
                     _log10(top) + count)
    if model == "SUBTRACTION":
        top, borrow = params.get("minuend_max", 10), params.get("allow_borrowing")
        return _load(2 + (2 if top > 100 else 0),
                     (4 if borrow else 1) + (2 if dp > 0 else 0),
                     dp + (3 if borrow else 0),
                     _log10(top) + 1)
    if model == "MULTIPLICATION":
        a, b, fractions = params.get("multiplicand_max", 10), params.get("multiplier_max", 10), params.get("use_fractions")
        return _load(3 + (3 if a > 100 else 0),
                     3 + (3 if dp > 0 else 0) + (2 if fractions else 0),
                     2 + dp + (3 if fractions else 0),
                     _log10(a) + _log10(b))
    if model == "DIVISION":
        top, remainder = params.get("dividend_max", 10), params.get("allow_remainder")
        return _load(4 + (3 if top > 100 else 0),
                     4 + (3 if dp > 0 else 0) + (2 if remainder else 0),
                     3 + dp + (2 if remainder else 0),
                     _log10(top) + 1)
    return dict(DEFAULT_COGNITIVE_LOAD)
