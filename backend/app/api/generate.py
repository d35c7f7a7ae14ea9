import logging
import random
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from app.core.config import get_settings
from app.generators.base import merge_params
from app.generators.random_source import clamp_year
from app.generators.registry import UnknownModelError, default_params, get_generator, list_models
from app.models.engine import DefaultParamsResponse, GenerateRequest, GenerateResponse, ModelListResponse
from app.services.difficulty_levels import InvalidLevelError, params_for_level, parse_level
from app.services.telemetry import instrument, emit_event

logger = logging.getLogger("mathengine.v1")
router = APIRouter(prefix="/api/v1", tags=["generate-v1"])


@router.get("/models", response_model=ModelListResponse)
@instrument(route="/api/v1/models", version="v1")
async def models_v1():
    return ModelListResponse(models=list_models())


@router.get("/models/{model_id}/defaults", response_model=DefaultParamsResponse)
@instrument(route="/api/v1/models/defaults", version="v1")
async def defaults_v1(model_id: str, year: Optional[int] = Query(default=None)):
    y = clamp_year(year if year is not None else get_settings().default_year)
    try:
        params = default_params(model_id, y)
    except UnknownModelError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DefaultParamsResponse(model_id=model_id, year=y, params=params)


@router.post("/generate", response_model=GenerateResponse)
@instrument(route="/api/v1/generate", version="v1")
async def generate_v1(request: GenerateRequest):
    try:
        generator = get_generator(request.model_id)
    except UnknownModelError as e:
        raise HTTPException(status_code=404, detail=str(e))

    year = clamp_year(request.year if request.year is not None else get_settings().default_year)
    base = None
    if request.level:
        try:
            level = parse_level(request.level)
        except InvalidLevelError as e:
            raise HTTPException(status_code=422, detail=str(e))
        year = level.year
        base = params_for_level(request.model_id, level)

    params = merge_params(base or generator.default_params(year), request.params)
    rng = random.Random(request.seed) if request.seed is not None else None
    output = generator.generate(params, rng=rng, year=year)

    emit_event("question_generated", route="/api/v1/generate", version="v1",
               model_id=generator.model_id, level=request.level, ok=True)
    return GenerateResponse(model_id=generator.model_id, year=year, level=request.level,
                            params=params, output=output)
