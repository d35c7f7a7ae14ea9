"""Area and perimeter generator for rectangles, squares, triangles and circles."""
from __future__ import annotations

import math

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, round_to, tidy

CALCULATION_TYPES = ("area", "perimeter", "both", "find_missing_dimension")

AREA_FORMULAS = {
    "rectangle": "Area = length × width",
    "square": "Area = side × side",
    "triangle": "Area = ½ × base × height",
    "circle": "Area = π × radius²",
}

PERIMETER_FORMULAS = {
    "rectangle": "Perimeter = 2 × (length + width)",
    "square": "Perimeter = 4 × side",
    "triangle": "Perimeter = side1 + side2 + side3",
    "circle": "Circumference = 2 × π × radius",
}

MEASUREMENT_UNITS = {
    "mm": "millimetres",
    "cm": "centimetres",
    "m": "metres",
    "units": "units",
}

CIRCLE_RADIUS_MAX = 10
# Share of measurements drawn with a tenths digit when decimals are on.
DECIMAL_SHARE = 0.4


def area(shape: str, dims: dict) -> float:
    if shape == "rectangle":
        return dims["length"] * dims["width"]
    if shape == "square":
        return dims["side"] ** 2
    if shape == "triangle":
        return 0.5 * dims["base"] * dims["height"]
    if shape == "circle":
        return math.pi * dims["radius"] ** 2
    return 0


def perimeter(shape: str, dims: dict) -> float:
    if shape == "rectangle":
        return 2 * (dims["length"] + dims["width"])
    if shape == "square":
        return 4 * dims["side"]
    if shape == "triangle":
        return dims["side1"] + dims["side2"] + dims["side3"]
    if shape == "circle":
        return 2 * math.pi * dims["radius"]
    return 0


def valid_third_side(side1: float, side2: float, max_value: float,
                     source: RandomValueSource, use_decimals: bool = False) -> float:
    """
    Third side strictly inside (|side1 - side2|, side1 + side2) and no
    larger than max_value. Falls back to the smaller known side when that
    open interval holds no value at the chosen precision.
    """
    if use_decimals:
        low = round_to(abs(side1 - side2) + 0.1, 1)
        high = round_to(min(side1 + side2 - 0.1, max_value), 1)
        if low <= high:
            return tidy(source.next(high, 1, low, 0.1), 1)
    else:
        low = math.floor(abs(side1 - side2)) + 1
        high = min(math.ceil(side1 + side2) - 1, math.floor(max_value))
        if low <= high:
            return source.randint(low, high)
    return min(side1, side2)


def _formatted(value: float, decimals: bool):
    return tidy(value, 2) if decimals else int(round_to(value, 0))


class AreaPerimeterGenerator(GeneratorContract):
    model_id = "AREA_PERIMETER"

    def default_params(self, year: int) -> dict:
        if year <= 3:
            return {"shape_types": ["rectangle", "square"], "measurement_units": ["cm", "units"],
                    "max_dimensions": 10, "include_decimal_measurements": False,
                    "calculation_types": ["area", "perimeter"], "allow_compound_shapes": False}
        if year <= 4:
            return {"shape_types": ["rectangle", "square", "triangle"],
                    "measurement_units": ["cm", "m", "units"], "max_dimensions": 15,
                    "include_decimal_measurements": False,
                    "calculation_types": ["area", "perimeter", "both"], "allow_compound_shapes": True}
        if year <= 5:
            return {"shape_types": ["rectangle", "square", "triangle"],
                    "measurement_units": ["mm", "cm", "m"], "max_dimensions": 20,
                    "include_decimal_measurements": True,
                    "calculation_types": list(CALCULATION_TYPES), "allow_compound_shapes": True}
        return {"shape_types": ["rectangle", "square", "triangle", "circle"],
                "measurement_units": ["mm", "cm", "m"], "max_dimensions": 25,
                "include_decimal_measurements": True,
                "calculation_types": list(CALCULATION_TYPES), "allow_compound_shapes": True}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        calc = source.choice(params.get("calculation_types") or ["area"])
        shape = source.choice(params.get("shape_types") or ["rectangle"])
        unit = source.choice(params.get("measurement_units") or ["cm"])
        decimals = bool(params.get("include_decimal_measurements", False))
        dims = self._dimensions(shape, params, source)

        if calc == "find_missing_dimension" and shape in ("rectangle", "square"):
            return self._missing(shape, dims, unit, decimals, source)
        if calc not in ("perimeter", "both"):
            calc = "area"

        a = _formatted(area(shape, dims), decimals) if calc in ("area", "both") else None
        p = _formatted(perimeter(shape, dims), decimals) if calc in ("perimeter", "both") else None
        if calc == "area":
            formula, answer = AREA_FORMULAS[shape], f"{a} {unit}²"
        elif calc == "perimeter":
            formula, answer = PERIMETER_FORMULAS[shape], f"{p} {unit}"
        else:
            formula = f"{AREA_FORMULAS[shape]} and {PERIMETER_FORMULAS[shape]}"
            answer = f"Area: {a} {unit}², Perimeter: {p} {unit}"
        return {
            "operation": "AREA_PERIMETER",
            "problem_type": f"calculate_{calc}",
            "shape_type": shape,
            "dimensions": dims,
            "measurement_unit": unit,
            "area_result": a,
            "perimeter_result": p,
            "missing_dimension": None,
            "formula_used": formula,
            "visual_description": self._describe(shape, dims, unit),
            "correct_answer": answer,
        }

    def _measure(self, max_value: float, decimals: bool, source: RandomValueSource):
        if decimals and source.chance(DECIMAL_SHARE):
            return source.next(max_value, 1, 1, 0.1)
        return source.next(max_value, 0, 1)

    def _dimensions(self, shape: str, params: dict, source: RandomValueSource) -> dict:
        top = params.get("max_dimensions", 10)
        decimals = bool(params.get("include_decimal_measurements", False))
        if shape == "square":
            return {"side": self._measure(top, decimals, source)}
        if shape == "circle":
            return {"radius": self._measure(min(top, CIRCLE_RADIUS_MAX), decimals, source)}
        if shape == "triangle":
            base = self._measure(top, decimals, source)
            height = self._measure(top, decimals, source)
            side2 = self._measure(top, decimals, source)
            side3 = valid_third_side(base, side2, top, source,
                                     use_decimals=decimals and source.chance(DECIMAL_SHARE))
            return {"base": base, "height": height, "side1": base, "side2": side2, "side3": side3}
        return {"length": self._measure(top, decimals, source), "width": self._measure(top, decimals, source)}

    def _missing(self, shape: str, dims: dict, unit: str, decimals: bool, source: RandomValueSource) -> dict:
        calc = source.choice(["area", "perimeter"])
        known_value = _formatted(area(shape, dims) if calc == "area" else perimeter(shape, dims), decimals)
        value_unit = f"{unit}²" if calc == "area" else unit

        if shape == "rectangle":
            missing_name = source.choice(["length", "width"])
            known_name = "width" if missing_name == "length" else "length"
            known = {known_name: dims[known_name]}
            description = (f"Rectangle with {known_name} {dims[known_name]}{unit} "
                           f"and {calc} {known_value}{value_unit}")
        else:
            missing_name = "side"
            known = {}
            description = f"Square with {calc} {known_value}{value_unit}"
        missing_value = dims[missing_name]

        return {
            "operation": "AREA_PERIMETER",
            "problem_type": "find_missing_dimension",
            "shape_type": shape,
            "dimensions": known,
            "measurement_unit": unit,
            "area_result": known_value if calc == "area" else None,
            "perimeter_result": known_value if calc == "perimeter" else None,
            "missing_dimension": {"name": missing_name, "value": missing_value},
            "formula_used": AREA_FORMULAS[shape] if calc == "area" else PERIMETER_FORMULAS[shape],
            "visual_description": description,
            "correct_answer": f"{_formatted(missing_value, decimals)} {unit}",
        }

    def _describe(self, shape: str, dims: dict, unit: str) -> str:
        if shape == "rectangle":
            return f"Rectangle with length {dims['length']}{unit} and width {dims['width']}{unit}"
        if shape == "square":
            return f"Square with sides of {dims['side']}{unit}"
        if shape == "triangle":
            return f"Triangle with base {dims['base']}{unit} and height {dims['height']}{unit}"
        return f"Circle with radius {dims['radius']}{unit}"
