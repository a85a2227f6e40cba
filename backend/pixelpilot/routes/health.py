"""
PixelPilot Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes the AI provider and reports the model registry's current
       selection so operators can see when traffic has moved off the primary
       model.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   Gemini reachable
    - degraded:  Gemini unreachable or not configured. AI endpoints still answer
                 with rule-based fallbacks, so the service stays routable (HTTP 200)
"""

import logging
import time

from fastapi import APIRouter

from pixelpilot import __version__
from pixelpilot.schemas.ai import HealthResponse
from pixelpilot.services.ai_service import ai_service
from pixelpilot.services.gemini_provider import gemini_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    gemini_status = "available"
    overall = "healthy"

    if not gemini_provider.configured:
        gemini_status = "not_configured"
        overall = "degraded"
    elif not await gemini_provider.health_check():
        gemini_status = "unavailable"
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        gemini=gemini_status,
        selection=ai_service.model_status(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
