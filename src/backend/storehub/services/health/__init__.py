from .health_service import HealthService

__all__ = ["HealthService"]
