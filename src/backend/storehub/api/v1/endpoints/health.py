from typing import Any, Dict

from fastapi import APIRouter, Request, Response, status

from storehub.services.health import HealthService
from storehub.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint to verify the service is running.
    """
    return await HealthService.check_health()


@router.get("/readiness")
async def readiness_check(request: Request, response: Response) -> Dict[str, Any]:
    """
    Readiness check: the main database must answer. Live tenant connections are reported
    alongside.
    """
    readiness = await HealthService.get_readiness(getattr(request.app.state, "tenant_registry", None))

    if readiness["status"] != "ready":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return readiness


@router.get("/healthz", include_in_schema=False)
async def kubernetes_health_check() -> Dict[str, str]:
    """
    Simplified health check for Kubernetes.
    """
    return {"status": "healthy"}
