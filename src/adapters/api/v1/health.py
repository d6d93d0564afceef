from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.core.config.settings import Settings
from src.infrastructure.dependency_injection.auth_dependencies import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(app_settings: Annotated[Settings, Depends(get_settings)]) -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return HealthResponse(
        status="ok",
        env=app_settings.APP_ENV,
        version=app_settings.VERSION,
        timestamp=datetime.now(timezone.utc),
    )
