from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storehub.models.mongodb.enums import ProductStatus


class SeoInfoSchema(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: List[str] = []


class CategoryCreateOrUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = ""
    image: Optional[str] = ""
    parent_category: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    seo: Optional[SeoInfoSchema] = None


class VariantOptionSchema(BaseModel):
    attribute_name: str
    value: str


class VariantSchema(BaseModel):
    name: str
    options: List[VariantOptionSchema] = []
    price: float = Field(ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    sku: str
    is_active: bool = True
    image: Optional[str] = ""


class VariantAttributeSchema(BaseModel):
    name: str
    values: List[str] = []


class DimensionsSchema(BaseModel):
    length: float = 0
    width: float = 0
    height: float = 0


class ProductCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=200)
    sku: str = Field(min_length=1, max_length=50)
    short_description: Optional[str] = ""
    description: Optional[str] = ""
    price: float = Field(default=0, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    tax_percentage: float = Field(default=0, ge=0, le=100)
    stock: int = Field(default=0, ge=0)
    track_quantity: bool = True
    low_stock_alert: int = 5
    allow_backorders: bool = False
    category: Optional[str] = None
    tags: List[str] = []
    gallery: List[str] = []
    thumbnail: Optional[str] = None
    status: ProductStatus = ProductStatus.ACTIVE
    is_featured: bool = False
    has_variants: bool = False
    variant_attributes: List[VariantAttributeSchema] = []
    variants: List[VariantSchema] = []
    dimensions: Optional[DimensionsSchema] = None
    weight: float = 0


class ProductUpdateRequest(BaseModel):
    """Partial update; only the fields sent are changed"""

    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = None
    sku: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    tax_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    stock: Optional[int] = Field(default=None, ge=0)
    track_quantity: Optional[bool] = None
    low_stock_alert: Optional[int] = None
    allow_backorders: Optional[bool] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    gallery: Optional[List[str]] = None
    thumbnail: Optional[str] = None
    status: Optional[ProductStatus] = None
    is_featured: Optional[bool] = None
    has_variants: Optional[bool] = None
    variant_attributes: Optional[List[VariantAttributeSchema]] = None
    variants: Optional[List[VariantSchema]] = None
    dimensions: Optional[DimensionsSchema] = None
    weight: Optional[float] = None
