"""Endpoints de health check (liveness/readiness)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings, get_messenger_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


class ReadinessResponse(BaseModel):
    """Resposta do readiness check (sem valores de configuração)."""

    status: str
    issues: list[str]
    timestamp: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness probe — configuração mínima do Messenger presente."""
    issues = get_messenger_settings().validate()
    if issues:
        logger.warning("readiness_settings_invalid", extra={"issue_count": len(issues)})

    body = ReadinessResponse(
        status="not_ready" if issues else "ready",
        issues=issues,
        timestamp=datetime.now(UTC).isoformat(),
    )
    return JSONResponse(content=body.model_dump(), status_code=503 if issues else 200)
