from typing import Optional

from fastapi import APIRouter, Depends

from storehub.api.v1.deps import get_owner_context
from storehub.schemas.catalog import CategoryCreateOrUpdateRequest, ProductCreateRequest, ProductUpdateRequest
from storehub.services.catalog import CategoryService, ProductService
from storehub.tenancy import TenantContext

router = APIRouter(prefix="/admin", tags=["Admin Catalog"])


@router.get("/categories")
def list_categories(ctx: TenantContext = Depends(get_owner_context)):
    return CategoryService.list_categories(ctx)


@router.post("/categories", status_code=201)
def create_category(request: CategoryCreateOrUpdateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return CategoryService.create_category(ctx, request)


@router.get("/categories/{category_id}")
def get_category(category_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return CategoryService.get_category(ctx, category_id)


@router.put("/categories/{category_id}")
def update_category(
    category_id: str, request: CategoryCreateOrUpdateRequest, ctx: TenantContext = Depends(get_owner_context)
):
    return CategoryService.update_category(ctx, category_id, request)


@router.delete("/categories/{category_id}")
def delete_category(category_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return CategoryService.delete_category(ctx, category_id)


@router.get("/products")
def list_products(
    page: int = 1,
    limit: int = 20,
    category: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    ctx: TenantContext = Depends(get_owner_context),
):
    return ProductService.list_products(ctx, page=page, limit=limit, category=category, status=status, search=search)


@router.post("/products", status_code=201)
def create_product(request: ProductCreateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return ProductService.create_product(ctx, request)


@router.get("/products/{product_id}")
def get_product(product_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return ProductService.get_product(ctx, product_id)


@router.put("/products/{product_id}")
def update_product(product_id: str, request: ProductUpdateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return ProductService.update_product(ctx, product_id, request)


@router.delete("/products/{product_id}")
def delete_product(product_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return ProductService.delete_product(ctx, product_id)
