"""Base generator contract for maths question generation.

Every model-specific generator (e.g. AdditionGenerator, CountingGenerator)
subclasses GeneratorContract and overrides default_params() and build().
Generators hold no per-call state; all randomness comes from the injected
RandomValueSource.
"""
from __future__ import annotations

import copy
import random

from app.core.config import get_settings
from app.generators.random_source import RandomValueSource, clamp_year


def merge_params(defaults: dict, overrides: dict | None) -> dict:
    """
    Deep copy of defaults with overrides applied.
    Nested dicts (e.g. value_constraints) are merged one level deep so a
    caller can override just `min` without losing `step`.
    """
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **copy.deepcopy(value)}
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class GeneratorContract:
    model_id: str = ""

    def default_params(self, year: int) -> dict:
        return {}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        raise NotImplementedError

    def generate(self, params: dict | None = None, rng: random.Random | None = None,
                 year: int | None = None) -> dict:
        """
        Fill missing keys from default_params(year), then build one question.

        `params` is never mutated. Returns a dict tagged with "operation".
        """
        if year is None:
            year = (params or {}).get("year", get_settings().default_year)
        resolved = merge_params(self.default_params(clamp_year(year)), params)
        resolved.pop("year", None)
        return self.build(resolved, RandomValueSource(rng))
