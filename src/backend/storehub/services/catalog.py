from typing import Optional

from fastapi import HTTPException
from mongoengine.queryset.visitor import Q

from storehub.models.mongodb.enums import ProductStatus
from storehub.schemas.catalog import (
    CategoryCreateOrUpdateRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
)
from storehub.services.utils import get_or_404, handle_write_errors, paginate, parse_object_id
from storehub.tenancy import TenantContext
from storehub.utils.logger import get_logger

logger = get_logger(__name__)


class CategoryService:
    @staticmethod
    def list_categories(ctx: TenantContext, active_only: bool = False) -> list:
        filters = {"is_active": True} if active_only else {}
        categories = ctx.categories.objects(**filters).order_by("sort_order", "name")
        return [category.to_serializable_dict() for category in categories]

    @staticmethod
    def get_category(ctx: TenantContext, category_id: str) -> dict:
        return get_or_404(ctx.categories, category_id).to_serializable_dict()

    @staticmethod
    def create_category(ctx: TenantContext, request: CategoryCreateOrUpdateRequest) -> dict:
        data = request.model_dump()
        data["parent_category"] = parse_object_id(request.parent_category, "parent_category")
        with handle_write_errors():
            category = ctx.categories.create(**data)
        logger.info(f"Created category {category.slug} for tenant {ctx.tenant_id}")
        return category.to_serializable_dict()

    @staticmethod
    def update_category(ctx: TenantContext, category_id: str, request: CategoryCreateOrUpdateRequest) -> dict:
        get_or_404(ctx.categories, category_id)
        data = request.model_dump(exclude_unset=True)
        if "parent_category" in data:
            data["parent_category"] = parse_object_id(request.parent_category, "parent_category")
        if "name" in data:
            # Regenerated from the new name
            data["slug"] = None
        with handle_write_errors():
            category = ctx.categories.update(category_id, **data)
        return category.to_serializable_dict()

    @staticmethod
    def delete_category(ctx: TenantContext, category_id: str) -> dict:
        category = get_or_404(ctx.categories, category_id)
        if ctx.products.count(category=category.pk):
            raise HTTPException(status_code=400, detail="Category has products and cannot be deleted")
        ctx.categories.delete(category_id)
        return {"message": "Category deleted successfully"}


class ProductService:
    @staticmethod
    def _check_category(ctx: TenantContext, category_id: Optional[str]):
        category = parse_object_id(category_id, "category")
        if category is not None and ctx.categories.get(category) is None:
            raise HTTPException(status_code=400, detail="Category not found")
        return category

    @staticmethod
    def list_products(
        ctx: TenantContext,
        page: int = 1,
        limit: int = 20,
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict:
        queryset = ctx.products.objects()
        if category:
            queryset = queryset.filter(category=parse_object_id(category, "category"))
        if status:
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(sku__icontains=search))
        return paginate(queryset.order_by("-created_at"), page, limit)

    @staticmethod
    def get_product(ctx: TenantContext, product_id: str) -> dict:
        return get_or_404(ctx.products, product_id).to_serializable_dict()

    @classmethod
    def create_product(cls, ctx: TenantContext, request: ProductCreateRequest) -> dict:
        data = request.model_dump()
        data["category"] = cls._check_category(ctx, request.category)
        with handle_write_errors():
            product = ctx.products.create(**data)
        logger.info(f"Created product {product.sku} for tenant {ctx.tenant_id}")
        return product.to_serializable_dict()

    @classmethod
    def update_product(cls, ctx: TenantContext, product_id: str, request: ProductUpdateRequest) -> dict:
        get_or_404(ctx.products, product_id)
        data = request.model_dump(exclude_unset=True)
        if "category" in data:
            data["category"] = cls._check_category(ctx, request.category)
        with handle_write_errors():
            product = ctx.products.update(product_id, **data)
        return product.to_serializable_dict()

    @staticmethod
    def delete_product(ctx: TenantContext, product_id: str) -> dict:
        get_or_404(ctx.products, product_id)
        ctx.products.delete(product_id)
        return {"message": "Product deleted successfully"}

    @staticmethod
    def list_active_products(
        ctx: TenantContext, page: int = 1, limit: int = 20, category: Optional[str] = None
    ) -> dict:
        queryset = ctx.products.objects(status=ProductStatus.ACTIVE.value)
        if category:
            queryset = queryset.filter(category=parse_object_id(category, "category"))
        return paginate(queryset.order_by("-is_featured", "-created_at"), page, limit)

    @staticmethod
    def get_active_product(ctx: TenantContext, product_id: str) -> dict:
        product = get_or_404(ctx.products, product_id)
        if product.status != ProductStatus.ACTIVE.value:
            raise HTTPException(status_code=404, detail="Product not found")
        data = product.to_serializable_dict()
        data["in_stock"] = product.is_in_stock()
        return data
