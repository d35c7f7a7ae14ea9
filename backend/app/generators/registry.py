"""Read-only generator registry: maps ModelId to generator instance."""
from __future__ import annotations

import random
from enum import Enum

from .addition import AdditionGenerator
from .area_perimeter import AreaPerimeterGenerator
from .base import GeneratorContract
from .change_calculation import ChangeCalculationGenerator
from .coin_recognition import CoinRecognitionGenerator
from .comparison import ComparisonGenerator
from .conversion import ConversionGenerator
from .counting import CountingGenerator
from .division import DivisionGenerator
from .fraction import FractionGenerator
from .linear_equation import LinearEquationGenerator
from .mixed_money_units import MixedMoneyUnitsGenerator
from .money_combinations import MoneyCombinationsGenerator
from .money_fractions import MoneyFractionsGenerator
from .money_scaling import MoneyScalingGenerator
from .multi_step import MultiStepGenerator
from .multiplication import MultiplicationGenerator
from .percentage import PercentageGenerator
from .position_direction import PositionDirectionGenerator
from .random_source import clamp_year
from .shape_recognition import ShapeRecognitionGenerator
from .subtraction import SubtractionGenerator
from .time_rate import TimeRateGenerator
from .unit_rate import UnitRateGenerator


class ModelId(str, Enum):
    ADDITION = "ADDITION"
    SUBTRACTION = "SUBTRACTION"
    MULTIPLICATION = "MULTIPLICATION"
    DIVISION = "DIVISION"
    PERCENTAGE = "PERCENTAGE"
    FRACTION = "FRACTION"
    COUNTING = "COUNTING"
    TIME_RATE = "TIME_RATE"
    CONVERSION = "CONVERSION"
    COMPARISON = "COMPARISON"
    UNIT_RATE = "UNIT_RATE"
    COIN_RECOGNITION = "COIN_RECOGNITION"
    CHANGE_CALCULATION = "CHANGE_CALCULATION"
    MONEY_COMBINATIONS = "MONEY_COMBINATIONS"
    MIXED_MONEY_UNITS = "MIXED_MONEY_UNITS"
    MONEY_FRACTIONS = "MONEY_FRACTIONS"
    MONEY_SCALING = "MONEY_SCALING"
    SHAPE_RECOGNITION = "SHAPE_RECOGNITION"
    AREA_PERIMETER = "AREA_PERIMETER"
    POSITION_DIRECTION = "POSITION_DIRECTION"
    LINEAR_EQUATION = "LINEAR_EQUATION"
    MULTI_STEP = "MULTI_STEP"


class UnknownModelError(LookupError):
    """Raised for a model id with no registered generator."""

    def __init__(self, model_id):
        self.model_id = model_id
        super().__init__(f"Unknown model id: {model_id}")


GENERATOR_REGISTRY: dict[ModelId, GeneratorContract] = {
    ModelId.ADDITION: AdditionGenerator(),
    ModelId.SUBTRACTION: SubtractionGenerator(),
    ModelId.MULTIPLICATION: MultiplicationGenerator(),
    ModelId.DIVISION: DivisionGenerator(),
    ModelId.PERCENTAGE: PercentageGenerator(),
    ModelId.FRACTION: FractionGenerator(),
    ModelId.COUNTING: CountingGenerator(),
    ModelId.TIME_RATE: TimeRateGenerator(),
    ModelId.CONVERSION: ConversionGenerator(),
    ModelId.COMPARISON: ComparisonGenerator(),
    ModelId.UNIT_RATE: UnitRateGenerator(),
    ModelId.COIN_RECOGNITION: CoinRecognitionGenerator(),
    ModelId.CHANGE_CALCULATION: ChangeCalculationGenerator(),
    ModelId.MONEY_COMBINATIONS: MoneyCombinationsGenerator(),
    ModelId.MIXED_MONEY_UNITS: MixedMoneyUnitsGenerator(),
    ModelId.MONEY_FRACTIONS: MoneyFractionsGenerator(),
    ModelId.MONEY_SCALING: MoneyScalingGenerator(),
    ModelId.SHAPE_RECOGNITION: ShapeRecognitionGenerator(),
    ModelId.AREA_PERIMETER: AreaPerimeterGenerator(),
    ModelId.POSITION_DIRECTION: PositionDirectionGenerator(),
    ModelId.LINEAR_EQUATION: LinearEquationGenerator(),
    ModelId.MULTI_STEP: MultiStepGenerator(),
}


def get_generator(model_id) -> GeneratorContract:
    """Look up a generator by ModelId or its string value (case-sensitive)."""
    try:
        return GENERATOR_REGISTRY[ModelId(model_id)]
    except (ValueError, KeyError):
        raise UnknownModelError(model_id) from None


def generate(model_id, params: dict | None = None, year: int | None = None,
             rng: random.Random | None = None) -> dict:
    return get_generator(model_id).generate(params, rng=rng, year=year)


def default_params(model_id, year: int) -> dict:
    return get_generator(model_id).default_params(clamp_year(year))


def list_models() -> list[str]:
    return [m.value for m in GENERATOR_REGISTRY]
