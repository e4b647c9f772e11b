from fastapi import APIRouter

from .endpoints.admin_catalog import router as admin_catalog_router
from .endpoints.admin_offers import router as admin_offers_router
from .endpoints.admin_sales import router as admin_sales_router
from .endpoints.admin_settings import router as admin_settings_router
from .endpoints.auth import router as auth_router
from .endpoints.health import router as health_router
from .endpoints.storefront import router as storefront_router

api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(health_router)
api_v1_router.include_router(auth_router)
api_v1_router.include_router(admin_catalog_router)
api_v1_router.include_router(admin_offers_router)
api_v1_router.include_router(admin_sales_router)
api_v1_router.include_router(admin_settings_router)
api_v1_router.include_router(storefront_router, prefix="/store/{store_id}")
api_v1_router.include_router(storefront_router, prefix="/storefront")
