"""Health check endpoints for the Quant Leap API."""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..config.logging import get_logger
from ..config.settings import get_settings, validate_required_settings
from ..services.cache import TTLCache
from .dependencies import get_cache
from .models.responses import HealthResponse, HealthStatus

logger = get_logger(__name__)
router = APIRouter()

APP_VERSION = "1.0.0"

# Track application start time for uptime calculation
_app_start_time = time.time()


def check_configuration_health() -> Dict[str, Any]:
    """Check which provider and alert credentials are configured."""
    settings = get_settings()
    missing = validate_required_settings(settings)

    checks = {
        "finnhub_configured": bool(settings.finnhub_api_key),
        "alpha_vantage_configured": bool(settings.alpha_vantage_api_key),
        "telegram_configured": bool(
            settings.telegram_bot_token and settings.telegram_chat_id
        ),
        "cron_secret_configured": bool(settings.cron_secret),
    }

    return {
        "status": "healthy" if not missing else "degraded",
        "checks": checks,
        "missing": missing,
    }


@router.get("/health", response_model=HealthResponse, summary="Basic Health Check")
async def basic_health_check(cache: TTLCache = Depends(get_cache)):
    """
    Report liveness, configuration completeness and cache size.

    Missing credentials degrade the status but never fail the check.
    """
    uptime_seconds = time.time() - _app_start_time

    try:
        configuration = check_configuration_health()
    except Exception as e:
        logger.error("Configuration health check failed", error=str(e), exc_info=True)
        configuration = {"status": "unhealthy", "error": str(e)}

    services = {
        "configuration": configuration,
        "cache": {"status": "healthy", "entries": len(cache)},
    }

    statuses = [s["status"] for s in services.values()]
    if "unhealthy" in statuses:
        overall_status = "unhealthy"
    elif "degraded" in statuses:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    health_status = HealthStatus(
        status=overall_status,
        services=services,
        uptime_seconds=uptime_seconds,
        version=APP_VERSION,
    )

    logger.debug("Basic health check completed", status=overall_status)
    return HealthResponse(success=True, health=health_status)


@router.get("/health/live", summary="Liveness Probe")
async def liveness_probe():
    """Returns 200 while the process can serve requests."""
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": time.time() - _app_start_time,
    }
