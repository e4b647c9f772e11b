from typing import Optional

from fastapi import APIRouter, Depends

from storehub.api.v1.deps import get_storefront_context
from storehub.services.catalog import ProductService
from storehub.services.offers import OfferService
from storehub.services.storefront import StorefrontService
from storehub.tenancy import TenantContext

# Mounted twice: under /store/{store_id} and under /storefront for store subdomains
router = APIRouter(tags=["Storefront"])


@router.get("")
def get_store_info(ctx: TenantContext = Depends(get_storefront_context)):
    return StorefrontService.get_store_info(ctx)


@router.get("/products")
def list_products(
    page: int = 1,
    limit: int = 20,
    category: Optional[str] = None,
    ctx: TenantContext = Depends(get_storefront_context),
):
    return ProductService.list_active_products(ctx, page=page, limit=limit, category=category)


@router.get("/products/{product_id}")
def get_product(product_id: str, ctx: TenantContext = Depends(get_storefront_context)):
    return ProductService.get_active_product(ctx, product_id)


@router.get("/categories")
def list_categories(ctx: TenantContext = Depends(get_storefront_context)):
    return StorefrontService.list_categories(ctx)


@router.get("/offers")
def list_offers(ctx: TenantContext = Depends(get_storefront_context)):
    return OfferService.list_live_offers(ctx)


@router.get("/settings")
def get_public_settings(ctx: TenantContext = Depends(get_storefront_context)):
    return StorefrontService.get_settings(ctx)
