from fastapi import APIRouter

from app.generators.registry import list_models
from app.models.engine import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(models=len(list_models()))
