"""Unit conversion generator (money, mass, capacity, length)."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, format_decimal, tidy


def _conv(src, dst, factor):
    return {"from_unit": src, "to_unit": dst, "conversion_factor": factor}


COMMON_CONVERSIONS = [
    _conv("pence", "pounds", 0.01), _conv("pounds", "pence", 100),
    _conv("grams", "kilograms", 0.001), _conv("kilograms", "grams", 1000),
    _conv("millilitres", "litres", 0.001), _conv("litres", "millilitres", 1000),
    _conv("millimetres", "centimetres", 0.1), _conv("centimetres", "millimetres", 10),
    _conv("centimetres", "metres", 0.01), _conv("metres", "centimetres", 100),
    _conv("metres", "kilometres", 0.001), _conv("kilometres", "metres", 1000),
]

UNIT_ABBREVIATIONS = {
    "pounds": "£", "pence": "p", "kilograms": "kg", "grams": "g", "litres": "l",
    "millilitres": "ml", "metres": "m", "centimetres": "cm", "millimetres": "mm",
    "kilometres": "km",
}

# Multiplying conversions take small inputs so results stay readable.
MULTIPLYING_INPUT_MAX = 100


def format_value(value: float, unit: str, decimal_places: int) -> str:
    if unit == "pounds":
        return f"£{value:.2f}"
    if unit == "pence":
        return f"{round(value)}p"
    return f"{format_decimal(value, decimal_places)} {unit}"


class ConversionGenerator(GeneratorContract):
    model_id = "CONVERSION"

    def default_params(self, year: int) -> dict:
        if year <= 2:
            return {"value_max": 100, "conversion_types": [_conv("pence", "pounds", 0.01)],
                    "decimal_places": 2}
        if year <= 4:
            return {"value_max": 1000,
                    "conversion_types": [_conv("pence", "pounds", 0.01), _conv("pounds", "pence", 100),
                                         _conv("centimetres", "metres", 0.01),
                                         _conv("metres", "centimetres", 100)],
                    "decimal_places": 2}
        return {"value_max": 10000, "conversion_types": [dict(c) for c in COMMON_CONVERSIONS],
                "decimal_places": 3}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        dp = max(0, int(params.get("decimal_places", 2)))
        conversion = source.choice(params.get("conversion_types") or COMMON_CONVERSIONS)
        factor = conversion["conversion_factor"]

        upper = params.get("value_max", 100)
        if factor > 10:
            upper = min(upper, MULTIPLYING_INPUT_MAX)
        if conversion["from_unit"] == "pounds":
            original = source.next(upper, 2, 1, 0.01)
        else:
            original = source.next(upper, 0, 1, 1)

        converted = tidy(original * factor, 3)
        return {
            "operation": "CONVERSION",
            "original_value": original,
            "original_unit": conversion["from_unit"],
            "converted_value": converted,
            "converted_unit": conversion["to_unit"],
            "conversion_factor": factor,
            "formatted_original": format_value(original, conversion["from_unit"], dp),
            "formatted_converted": format_value(converted, conversion["to_unit"], dp),
        }
