"""
Tests for difficulty_levels.py: level parsing and movement, sub-level
parameter tables, transition smoothness and cognitive-load scores.
"""
import os
import random
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.generators.registry import UnknownModelError, generate, get_generator
from app.services.difficulty_levels import (
    ADDITION_LEVELS,
    DEFAULT_COGNITIVE_LOAD,
    LEVEL_TABLES,
    DifficultyLevel,
    InvalidLevelError,
    all_levels,
    cognitive_load,
    create_level,
    from_decimal,
    from_index,
    has_level_table,
    level_index,
    next_level,
    params_for_level,
    parse_level,
    shift_level,
    validate_transition,
)


def _lvl(text: str) -> DifficultyLevel:
    return parse_level(text)


# ── Level value type ──────────────────────────────────────────────────────────

class TestDifficultyLevel:
    def test_display_and_decimal(self):
        level = DifficultyLevel(3, 2)
        assert level.display_name == "3.2"
        assert str(level) == "3.2"
        assert level.decimal == 3.1

    def test_ordering(self):
        assert _lvl("2.4") < _lvl("3.1") < _lvl("3.2")

    def test_to_dict(self):
        assert DifficultyLevel(4, 1).to_dict() == {"year": 4, "sub_level": 1, "display_name": "4.1"}

    def test_all_levels(self):
        levels = all_levels()
        assert len(levels) == 24
        assert levels[0] == DifficultyLevel(1, 1)
        assert levels[-1] == DifficultyLevel(6, 4)
        assert levels == sorted(levels)


class TestCreateAndParse:
    def test_parse(self):
        assert parse_level("3.2") == DifficultyLevel(3, 2)
        assert parse_level(" 6.4 ") == DifficultyLevel(6, 4)

    @pytest.mark.parametrize("bad", ["3", "3.2.1", "a.b", "", "3.", "7.1", "0.4", "3.5", "3.0"])
    def test_parse_rejects(self, bad):
        with pytest.raises(InvalidLevelError):
            parse_level(bad)

    def test_invalid_level_is_value_error(self):
        with pytest.raises(ValueError):
            create_level(3, 9)

    def test_from_decimal(self):
        assert from_decimal(3.1) == DifficultyLevel(3, 2)
        assert from_decimal(0.2) == DifficultyLevel(1, 1)
        assert from_decimal(9.9) == DifficultyLevel(6, 4)


# ── Level movement ────────────────────────────────────────────────────────────

class TestNextLevel:
    def test_advance_within_year(self):
        assert next_level(_lvl("3.2")) == _lvl("3.3")

    def test_advance_rolls_into_next_year(self):
        assert next_level(_lvl("3.4")) == _lvl("4.1")

    def test_retreat_rolls_into_previous_year(self):
        assert next_level(_lvl("4.1"), advancing=False) == _lvl("3.4")

    def test_saturates_at_ends(self):
        assert next_level(_lvl("6.4")) == _lvl("6.4")
        assert next_level(_lvl("1.1"), advancing=False) == _lvl("1.1")


class TestShiftLevel:
    def test_one_sub_level_up(self):
        assert shift_level(_lvl("3.2"), 0.1) == _lvl("3.3")

    def test_advance_carries_into_next_year(self):
        assert shift_level(_lvl("3.3"), 0.3) == _lvl("4.2")
        assert shift_level(_lvl("3.4"), 0.1) == _lvl("4.1")
        assert shift_level(_lvl("5.4"), 0.2) == _lvl("6.2")

    def test_matches_next_level_one_step_at_a_time(self):
        for level in all_levels():
            assert shift_level(level, 0.1) == next_level(level)
            assert shift_level(level, -0.1) == next_level(level, advancing=False)

    def test_level_index_round_trip(self):
        assert level_index(_lvl("1.1")) == 0
        assert level_index(_lvl("6.4")) == 23
        assert [from_index(i) for i in range(24)] == all_levels()
        assert from_index(-3) == _lvl("1.1")
        assert from_index(99) == _lvl("6.4")

    def test_reduce_rolls_back_a_year(self):
        assert shift_level(_lvl("3.1"), -0.1) == _lvl("2.4")
        assert shift_level(_lvl("3.3"), -0.2) == _lvl("3.1")

    def test_clamped_to_range(self):
        assert shift_level(_lvl("1.1"), -0.2) == _lvl("1.1")
        assert shift_level(_lvl("6.4"), 0.3) == _lvl("6.4")


# ── Parameter tables ──────────────────────────────────────────────────────────

class TestParamsForLevel:
    def test_tables_cover_expected_levels(self):
        assert len(ADDITION_LEVELS) == 24
        assert has_level_table("PERCENTAGE", _lvl("4.1"))
        assert not has_level_table("PERCENTAGE", _lvl("3.4"))
        assert has_level_table("FRACTION", _lvl("3.1"))
        assert not has_level_table("FRACTION", _lvl("2.4"))
        assert not has_level_table("COUNTING", _lvl("3.1"))

    def test_addition_params(self):
        p = params_for_level("ADDITION", _lvl("2.3"))
        assert p["max_value"] == 20
        assert p["operand_count"] == 2
        assert p["allow_carrying"] is False
        assert p["decimal_places"] == 0

    def test_division_exact_levels(self):
        p = params_for_level("DIVISION", _lvl("3.3"))
        assert p["ensure_whole"] is True
        assert p["allow_remainder"] is False

    def test_percentage_operations(self):
        assert params_for_level("PERCENTAGE", _lvl("4.1"))["operation_types"] == ["of"]
        assert params_for_level("PERCENTAGE", _lvl("6.1"))["operation_types"] == ["of", "increase", "decrease"]
        assert params_for_level("PERCENTAGE", _lvl("6.4"))["operation_types"] == ["decrease"]

    def test_fallback_to_year_defaults(self):
        assert params_for_level("PERCENTAGE", _lvl("2.3")) == get_generator("PERCENTAGE").default_params(2)
        assert params_for_level("COUNTING", _lvl("5.2")) == get_generator("COUNTING").default_params(5)

    def test_unknown_model(self):
        with pytest.raises(UnknownModelError):
            params_for_level("NOPE", _lvl("3.1"))

    @pytest.mark.parametrize("model_id", sorted(LEVEL_TABLES))
    def test_every_table_level_generates(self, model_id):
        table, _ = LEVEL_TABLES[model_id]
        for name in table:
            level = _lvl(name)
            out = generate(model_id, params_for_level(model_id, level), year=level.year, rng=random.Random(0))
            assert out["operation"] == model_id

    def test_params_are_fresh_copies(self):
        first = params_for_level("MULTIPLICATION", _lvl("3.3"))
        first["tables_focus"].append(99)
        assert 99 not in params_for_level("MULTIPLICATION", _lvl("3.3"))["tables_focus"]


# ── Transition validation ─────────────────────────────────────────────────────

class TestValidateTransition:
    def test_smooth_step(self):
        report = validate_transition("ADDITION", _lvl("3.3"), _lvl("3.4"))
        assert report["is_smooth"] is True
        assert report["max_parameter_change"] == 50
        assert report["simultaneous_changes"] == 1
        assert report["warnings"] == []

    def test_large_jump_flagged(self):
        report = validate_transition("ADDITION", _lvl("3.2"), _lvl("3.3"))
        assert report["is_smooth"] is False
        assert report["max_parameter_change"] == pytest.approx(66.7)
        assert report["recommendations"] == ["Consider adding intermediate sub-level"]

    def test_too_many_changes_flagged(self):
        report = validate_transition("DIVISION", _lvl("5.2"), _lvl("5.3"))
        assert report["simultaneous_changes"] == 2
        assert report["cognitive_load_increase"] == 100

    def test_no_change(self):
        report = validate_transition("ADDITION", _lvl("1.4"), _lvl("2.1"))
        assert report["is_smooth"] is True
        assert report["changes"] == []
        assert report["cognitive_load_increase"] == 0


# ── Cognitive load ────────────────────────────────────────────────────────────

class TestCognitiveLoad:
    def test_addition_scores(self):
        load = cognitive_load("ADDITION", params_for_level("ADDITION", _lvl("3.3")))
        assert load == {
            "working_memory_load": 6,
            "procedural_complexity": 3,
            "conceptual_depth": 2,
            "visual_processing": 5,
            "total_load": 40,
        }

    def test_scores_capped_at_ten(self):
        load = cognitive_load("MULTIPLICATION", {"multiplicand_max": 1500, "multiplier_max": 150,
                                                 "decimal_places": 3, "use_fractions": True})
        assert all(load[k] <= 10 for k in ("working_memory_load", "procedural_complexity",
                                             "conceptual_depth", "visual_processing"))
        assert load["total_load"] <= 100

    def test_harder_level_is_heavier(self):
        easy = cognitive_load("SUBTRACTION", params_for_level("SUBTRACTION", _lvl("1.1")))
        hard = cognitive_load("SUBTRACTION", params_for_level("SUBTRACTION", _lvl("6.4")))
        assert hard["total_load"] > easy["total_load"]

    def test_default_for_other_models(self):
        assert cognitive_load("COUNTING", {}) == DEFAULT_COGNITIVE_LOAD
