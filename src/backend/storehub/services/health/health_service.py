import time
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from storehub.core.config import settings
from storehub.tenancy import TenantRegistry
from storehub.utils.logger import get_logger

logger = get_logger(__name__)


class HealthService:
    """Service for health and readiness checks of system components"""

    @staticmethod
    async def check_health() -> Dict[str, Any]:
        """
        Performs a basic health check to determine if the service is running.

        Returns:
            Dictionary with status and timestamp
        """
        return {"status": "healthy", "timestamp": time.time(), "version": settings.VERSION}

    @staticmethod
    async def check_database() -> Dict[str, Any]:
        """
        Checks the main database through the connection opened at startup.

        Returns:
            Dictionary with database status and connection info
        """
        try:
            from mongoengine.connection import get_connection

            connection = get_connection()
            server_info = await run_in_threadpool(connection.server_info)

            return {
                "status": "connected",
                "version": server_info.get("version", "unknown"),
                "connection": settings.get_main_db_host(),  # Only host:port, not credentials
            }
        except Exception as e:
            logger.error("Database health check failed", exc_info=True)
            return {
                "status": "disconnected",
                "error": str(e),
            }

    @staticmethod
    def check_tenants(registry: Optional[TenantRegistry]) -> Dict[str, Any]:
        if registry is None:
            return {"status": "not_initialized"}
        return {"status": "healthy", **registry.stats()}

    @classmethod
    async def get_readiness(cls, registry: Optional[TenantRegistry] = None) -> Dict[str, Any]:
        """
        Ready when the main database answers. Tenant connections are reported but never
        block readiness; they are opened on demand.
        """
        db_status = await cls.check_database()

        return {
            "status": "ready" if db_status["status"] == "connected" else "not_ready",
            "timestamp": time.time(),
            "components": {
                "database": db_status,
                "tenants": cls.check_tenants(registry),
            },
        }
