# Document shapes stored in every tenant database. They are declared once and bound to a
# tenant connection by storehub.tenancy.schema_registry.

__all__ = [
    "TenantDocument",
    "Category",
    "Customer",
    "Address",
    "Offer",
    "Order",
    "OrderItem",
    "Payment",
    "Product",
    "Variant",
    "Settings",
    "ENTITY_DEFINITIONS",
]

from ..enums import EntityKind
from .base import TenantDocument
from .category import Category
from .customer import Address, Customer
from .offer import Offer
from .order import Order, OrderItem
from .payment import Payment
from .product import Product, Variant
from .settings import Settings

ENTITY_DEFINITIONS = {
    EntityKind.CUSTOMER: Customer,
    EntityKind.PRODUCT: Product,
    EntityKind.ORDER: Order,
    EntityKind.CATEGORY: Category,
    EntityKind.OFFER: Offer,
    EntityKind.PAYMENT: Payment,
    EntityKind.SETTINGS: Settings,
}
