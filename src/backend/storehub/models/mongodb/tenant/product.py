from mongoengine import EmbeddedDocument, ValidationError, fields

from ..enums import ProductStatus, choices
from ..utils import slugify
from .base import TenantDocument


class VariantAttribute(EmbeddedDocument):
    name = fields.StringField(required=True, max_length=100)
    values = fields.ListField(fields.StringField(max_length=100))


class VariantOption(EmbeddedDocument):
    attribute_name = fields.StringField(required=True)
    value = fields.StringField(required=True)


class Variant(EmbeddedDocument):
    name = fields.StringField(required=True, max_length=100)
    options = fields.EmbeddedDocumentListField(VariantOption, default=list)
    price = fields.FloatField(required=True, min_value=0)
    original_price = fields.FloatField(min_value=0)
    stock = fields.IntField(default=0, min_value=0)
    sku = fields.StringField(required=True, max_length=50)
    is_active = fields.BooleanField(default=True)
    image = fields.StringField(default="")


class Dimensions(EmbeddedDocument):
    length = fields.FloatField(default=0, min_value=0)
    width = fields.FloatField(default=0, min_value=0)
    height = fields.FloatField(default=0, min_value=0)


class Product(TenantDocument):
    name = fields.StringField(required=True, max_length=200)
    slug = fields.StringField(max_length=250)
    sku = fields.StringField(required=True, unique=True, max_length=50)
    short_description = fields.StringField(default="", max_length=500)
    description = fields.StringField(default="")

    price = fields.FloatField(default=0, min_value=0)
    original_price = fields.FloatField(min_value=0)
    tax_percentage = fields.FloatField(default=0, min_value=0, max_value=100)
    stock = fields.IntField(default=0, min_value=0)
    track_quantity = fields.BooleanField(default=True)
    low_stock_alert = fields.IntField(default=5, min_value=0)
    allow_backorders = fields.BooleanField(default=False)

    category = fields.ObjectIdField()
    tags = fields.ListField(fields.StringField())
    gallery = fields.ListField(fields.StringField())
    thumbnail = fields.StringField()
    status = fields.StringField(choices=choices(ProductStatus), default=ProductStatus.ACTIVE.value)
    is_featured = fields.BooleanField(default=False)

    has_variants = fields.BooleanField(default=False)
    variant_attributes = fields.EmbeddedDocumentListField(VariantAttribute, default=list)
    variants = fields.EmbeddedDocumentListField(Variant, default=list)

    dimensions = fields.EmbeddedDocumentField(Dimensions)
    weight = fields.FloatField(default=0, min_value=0)

    meta = {
        "collection": "products",
        "indexes": ["name", "slug", "category", "status", "is_featured", "has_variants", "-created_at"],
    }

    def clean(self):
        if self.sku:
            self.sku = self.sku.strip().upper()
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        if not self.thumbnail and self.gallery:
            self.thumbnail = self.gallery[0]

        if self.has_variants:
            # Price and stock live on the variants
            self.price = 0
            self.original_price = None
            self.stock = 0
            if not self.variants:
                raise ValidationError("At least one variant is required when has_variants is true")
            for variant in self.variants:
                variant.sku = variant.sku.strip().upper() if variant.sku else variant.sku
            skus = [variant.sku for variant in self.variants]
            if len(skus) != len(set(skus)):
                raise ValidationError("Variant SKUs must be unique")
        elif self.original_price is not None and self.original_price <= self.price:
            raise ValidationError("Original price must be greater than selling price")

    @property
    def total_stock(self) -> int:
        if self.has_variants:
            return sum(variant.stock or 0 for variant in self.variants if variant.is_active)
        return self.stock or 0

    def is_in_stock(self, quantity: int = 1) -> bool:
        if not self.track_quantity or self.allow_backorders:
            return True
        return self.total_stock >= quantity
