"""
Tests for the measurement, geometry and pattern generators: time/rate,
conversion, comparison, unit rate, shapes, area/perimeter, position and
linear equations.
"""
import os
import random
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.generators.area_perimeter import AreaPerimeterGenerator, valid_third_side
from app.generators.comparison import ComparisonGenerator
from app.generators.conversion import MULTIPLYING_INPUT_MAX, ConversionGenerator, format_value
from app.generators.linear_equation import LinearEquationGenerator, format_equation
from app.generators.position_direction import (
    PositionDirectionGenerator,
    grid_reference,
    move,
    relative_position,
    simple_path,
)
from app.generators.random_source import RandomValueSource
from app.generators.shape_recognition import NO_VERTEX_SHAPES, SHAPE_DATA, ShapeRecognitionGenerator
from app.generators.time_rate import TimeRateGenerator, convert_periods
from app.generators.unit_rate import UnitRateGenerator

SEEDS = range(40)


def _src(seed: int = 0) -> RandomValueSource:
    return RandomValueSource(random.Random(seed))


# ── Time / rate ───────────────────────────────────────────────────────────────

class TestTimeRate:
    def test_time_to_target_rounds_periods_up(self):
        gen = TimeRateGenerator()
        for seed in SEEDS:
            out = gen.generate({"problem_type": "time_to_target"}, rng=random.Random(seed), year=4)
            rate = out["rate"]["value"]
            periods = out["calculation"]["periods"]
            total = out["calculation"]["total_value"]
            assert periods * rate >= total - 1e-9
            assert (periods - 1) * rate < total

    def test_total_after_time(self):
        gen = TimeRateGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=1)
            calc = out["calculation"]
            assert calc["total_value"] == pytest.approx(calc["periods"] * out["rate"]["value"])
            assert calc["total_value"] <= 50

    def test_period_label_plural(self):
        out = TimeRateGenerator().generate({"problem_type": "rate_calculation", "rate_period": "week"},
                                           rng=random.Random(1), year=5)
        assert out["period_label"] == "weeks"

    def test_convert_periods(self):
        assert convert_periods("week", "day", 7) == 49
        assert convert_periods("fortnight", "day", 7) == 7


# ── Conversion ────────────────────────────────────────────────────────────────

class TestConversion:
    def test_converted_value(self):
        gen = ConversionGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=6)
            assert out["converted_value"] == pytest.approx(out["original_value"] * out["conversion_factor"],
                                                           abs=1e-3)

    def test_multiplying_conversions_use_small_inputs(self):
        params = {"conversion_types": [{"from_unit": "kilograms", "to_unit": "grams", "conversion_factor": 1000}]}
        gen = ConversionGenerator()
        for seed in SEEDS:
            assert gen.generate(params, rng=random.Random(seed), year=6)["original_value"] <= MULTIPLYING_INPUT_MAX

    def test_format_value(self):
        assert format_value(2.5, "pounds", 2) == "£2.50"
        assert format_value(45, "pence", 2) == "45p"
        assert format_value(1.25, "metres", 2) == "1.25 metres"


# ── Comparison ────────────────────────────────────────────────────────────────

class TestComparison:
    def test_direct_winner_is_highest(self):
        gen = ComparisonGenerator()
        for seed in SEEDS:
            out = gen.generate({"comparison_type": "direct"}, rng=random.Random(seed), year=2)
            values = [o["value"] for o in out["options"]]
            assert values[out["winner_index"]] == max(values)

    def test_better_value_winner_has_lowest_unit_rate(self):
        gen = ComparisonGenerator()
        for seed in SEEDS:
            out = gen.generate({"comparison_type": "better_value", "value_count": 3},
                               rng=random.Random(seed), year=6)
            rates = [o["unit_rate"] for o in out["options"]]
            assert len(rates) == 3
            assert rates[out["winner_index"]] == min(rates)
            assert out["difference"] >= 0


# ── Unit rate ─────────────────────────────────────────────────────────────────

class TestUnitRate:
    def test_target_differs_from_base(self):
        gen = UnitRateGenerator()
        for seed in SEEDS:
            out = gen.generate(rng=random.Random(seed), year=3)
            assert out["target_quantity"] != out["base_quantity"]
            assert out["comparison_rates"] == []

    def test_narrow_target_range_avoids_base(self):
        params = {"base_quantity_range": {"min": 4, "max": 4}, "target_quantity_range": {"min": 4, "max": 5}}
        gen = UnitRateGenerator()
        for seed in SEEDS:
            out = gen.generate(params, rng=random.Random(seed), year=3)
            assert out["base_quantity"] == 4
            assert out["target_quantity"] == 5

    def test_comparisons_flag_better_rates(self):
        gen = UnitRateGenerator()
        out = gen.generate({"context": "cost"}, rng=random.Random(3), year=6)
        assert len(out["comparison_rates"]) == 3
        for c in out["comparison_rates"]:
            assert c["better"] == (c["unit_rate"] < out["unit_rate"])


# ── Shape recognition ─────────────────────────────────────────────────────────

class TestShapeRecognition:
    def test_count_sides_never_picks_circle(self):
        gen = ShapeRecognitionGenerator()
        for seed in SEEDS:
            out = gen.generate({"problem_types": ["count_sides"]}, rng=random.Random(seed), year=2)
            assert out["target_shape"] != "circle"
            assert out["correct_answer"] == SHAPE_DATA[out["target_shape"]]["sides"]

    def test_count_vertices_skips_curved_shapes(self):
        gen = ShapeRecognitionGenerator()
        for seed in SEEDS:
            out = gen.generate({"problem_types": ["count_vertices"]}, rng=random.Random(seed), year=4)
            assert out["target_shape"] not in NO_VERTEX_SHAPES

    def test_count_sides_falls_back_to_identify(self):
        params = {"include_2d_shapes": ["circle"], "include_3d_shapes": ["sphere"], "problem_types": ["count_sides"]}
        out = ShapeRecognitionGenerator().generate(params, rng=random.Random(0))
        assert out["problem_type"] == "identify_shape"
        assert out["correct_answer"] == out["target_shape"]

    def test_compare_shapes(self):
        params = {"include_2d_shapes": ["triangle", "hexagon"], "include_3d_shapes": [],
                  "problem_types": ["compare_shapes"]}
        out = ShapeRecognitionGenerator().generate(params, rng=random.Random(1))
        first, second = (s["name"] for s in out["shape_data"])
        assert {first, second} == {"triangle", "hexagon"}
        expected = "first_more_sides" if first == "hexagon" else "second_more_sides"
        assert out["comparison_result"] == expected
        assert out["correct_answer"] == "hexagon has more sides"


# ── Area / perimeter ──────────────────────────────────────────────────────────

class TestAreaPerimeter:
    def test_triangle_inequality_holds(self):
        gen = AreaPerimeterGenerator()
        params = {"shape_types": ["triangle"], "calculation_types": ["perimeter"]}
        for year in (4, 5, 6):
            for seed in SEEDS:
                dims = gen.generate(params, rng=random.Random(seed), year=year)["dimensions"]
                a, b, c = dims["side1"], dims["side2"], dims["side3"]
                assert c - abs(a - b) > 1e-9
                assert (a + b) - c > 1e-9

    def test_valid_third_side_bounds(self):
        for seed in SEEDS:
            side = valid_third_side(3, 5, 20, _src(seed))
            assert 3 <= side <= 7

    def test_valid_third_side_respects_max(self):
        for seed in SEEDS:
            assert valid_third_side(9, 9, 10, _src(seed)) <= 10

    def test_rectangle_area(self):
        gen = AreaPerimeterGenerator()
        params = {"shape_types": ["rectangle"], "calculation_types": ["area"]}
        for seed in SEEDS:
            out = gen.generate(params, rng=random.Random(seed), year=3)
            dims = out["dimensions"]
            assert out["problem_type"] == "calculate_area"
            assert out["area_result"] == dims["length"] * dims["width"]
            assert out["perimeter_result"] is None
            assert out["correct_answer"] == f"{out['area_result']} {out['measurement_unit']}²"

    def test_both_reports_area_and_perimeter(self):
        params = {"shape_types": ["square"], "calculation_types": ["both"]}
        out = AreaPerimeterGenerator().generate(params, rng=random.Random(2), year=4)
        side = out["dimensions"]["side"]
        assert out["area_result"] == side * side
        assert out["perimeter_result"] == 4 * side
        assert out["correct_answer"].startswith("Area: ")

    def test_missing_dimension(self):
        params = {"shape_types": ["rectangle"], "calculation_types": ["find_missing_dimension"],
                  "include_decimal_measurements": False}
        out = AreaPerimeterGenerator().generate(params, rng=random.Random(5), year=5)
        assert out["problem_type"] == "find_missing_dimension"
        missing = out["missing_dimension"]
        assert missing["name"] in ("length", "width")
        assert missing["name"] not in out["dimensions"]

    def test_circle_missing_dimension_falls_back_to_area(self):
        params = {"shape_types": ["circle"], "calculation_types": ["find_missing_dimension"]}
        out = AreaPerimeterGenerator().generate(params, rng=random.Random(0), year=6)
        assert out["problem_type"] == "calculate_area"
        assert out["dimensions"]["radius"] <= 10


# ── Position / direction ──────────────────────────────────────────────────────

class TestPositionDirection:
    def test_move_clamps_to_grid(self):
        assert move({"x": 2, "y": 2}, "North", 5, 4) == {"x": 2, "y": 4}
        assert move({"x": 2, "y": 2}, "south-west", 3, 4) == {"x": 1, "y": 1}

    def test_grid_reference(self):
        pos = {"x": 3, "y": 2}
        assert grid_reference(pos, "coordinate_plane") == "(3, 2)"
        assert grid_reference(pos, "lettered_grid") == "C2"
        assert grid_reference(pos, "simple_grid") == "Column 3, Row 2"

    def test_relative_position(self):
        ref = {"x": 3, "y": 3}
        assert relative_position(ref, {"x": 3, "y": 3}) == "same position"
        assert relative_position(ref, {"x": 3, "y": 5}) == "above"
        assert relative_position(ref, {"x": 1, "y": 1}) == "below and to the left"

    def test_simple_path_reaches_target(self):
        start, target = {"x": 1, "y": 4}, {"x": 3, "y": 2}
        path = simple_path(start, target, use_compass=True)
        assert path == [{"direction": "East", "steps": 2}, {"direction": "South", "steps": 2}]
        pos = start
        for leg in path:
            pos = move(pos, leg["direction"], leg["steps"], 8)
        assert pos == target

    def test_follow_directions_stays_on_grid(self):
        gen = PositionDirectionGenerator()
        for seed in SEEDS:
            out = gen.generate({"problem_types": ["follow_directions"]}, rng=random.Random(seed), year=5)
            target = out["target_position"]
            assert 1 <= target["x"] <= out["grid_size"]
            assert 1 <= target["y"] <= out["grid_size"]

    def test_every_year_builds(self):
        gen = PositionDirectionGenerator()
        for year in range(1, 7):
            for seed in range(10):
                out = gen.generate(rng=random.Random(seed), year=year)
                assert out["operation"] == "POSITION_DIRECTION"
                assert out["grid_size"] <= 8


# ── Linear equation ───────────────────────────────────────────────────────────

class TestLinearEquation:
    @pytest.mark.parametrize("slope,intercept,expected", [
        (1, 0, "y = x"),
        (-1, 3, "y = -x + 3"),
        (2, -4, "y = 2x - 4"),
        (0.5, 1.25, "y = 0.5x + 1.25"),
    ])
    def test_format_equation(self, slope, intercept, expected):
        assert format_equation(slope, intercept) == expected

    def test_slope_never_zero(self):
        gen = LinearEquationGenerator()
        for seed in SEEDS:
            assert gen.generate(rng=random.Random(seed), year=6)["slope"] != 0

    def test_positive_slope_when_negatives_disallowed(self):
        gen = LinearEquationGenerator()
        params = {"slope_range": {"min": -3, "max": 3}, "allow_negative_slope": False}
        for seed in SEEDS:
            assert gen.generate(params, rng=random.Random(seed), year=3)["slope"] >= 1

    def test_x_values_unique_sorted(self):
        gen = LinearEquationGenerator()
        for seed in SEEDS:
            xs = gen.generate(rng=random.Random(seed), year=5)["x_values"]
            assert xs == sorted(set(xs))
            assert len(xs) == 5

    def test_x_value_count_capped_by_range(self):
        params = {"x_range": {"min": 0, "max": 2}, "x_value_count": 10}
        xs = LinearEquationGenerator().generate(params, rng=random.Random(0), year=3)["x_values"]
        assert xs == [0, 1, 2]

    def test_evaluations_follow_equation(self):
        out = LinearEquationGenerator().generate(rng=random.Random(8), year=3)
        for point in out["evaluations"]:
            assert point["y"] == out["slope"] * point["x"] + out["intercept"]

    def test_solve_for_x_target_is_a_table_value(self):
        out = LinearEquationGenerator().generate({"problem_types": ["solve_for_x"]},
                                                 rng=random.Random(4), year=6)
        assert out["target_x"] in out["x_values"]
        assert out["target_y"] is None
