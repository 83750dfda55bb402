"""
Health Check API Endpoints
GET /api/v1/health - Liveness plus configuration validity
GET /api/v1/health/config - Full configuration validation report
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...services.config.config_validator import get_validator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["Health"])

SERVICE_NAME = "storefront-catalog"
SERVICE_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Response model for the health check"""
    status: str
    service: str
    version: str
    config_valid: bool
    config_errors: int
    config_warnings: int


@router.get("", response_model=HealthResponse)
async def get_health():
    """
    Liveness and configuration health

    status is "degraded" when the catalog config fails validation; the
    service keeps running on its built-in defaults in that case.

    Example:
        GET /api/v1/health

        Response:
        {
            "status": "healthy",
            "service": "storefront-catalog",
            "version": "1.0.0",
            "config_valid": true,
            "config_errors": 0,
            "config_warnings": 0
        }
    """
    try:
        report = get_validator().validate_all().to_dict()
    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Health check failed: {str(e)}"
        )

    return HealthResponse(
        status="healthy" if report["overall_valid"] else "degraded",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        config_valid=report["overall_valid"],
        config_errors=report["total_errors"],
        config_warnings=report["total_warnings"],
    )


@router.get("/config")
async def get_config_health() -> Dict[str, Any]:
    """
    Full configuration validation report

    Includes the JSON schema check and the cross-field consistency checks
    (default page size allowed, duplicate brands, navigator timings).
    """
    try:
        return get_validator().validate_all().to_dict()
    except Exception as e:
        logger.error(f"Config health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Health check failed: {str(e)}"
        )
