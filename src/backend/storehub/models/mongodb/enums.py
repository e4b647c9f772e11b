from enum import Enum


class EntityKind(str, Enum):
    CUSTOMER = "Customer"
    PRODUCT = "Product"
    ORDER = "Order"
    CATEGORY = "Category"
    OFFER = "Offer"
    PAYMENT = "Payment"
    SETTINGS = "Settings"


class ProductStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderPaymentMethod(str, Enum):
    COD = "cod"
    ONLINE = "online"
    CARD = "card"
    WALLET = "wallet"


class PaymentMethod(str, Enum):
    COD = "cod"
    ONLINE = "online"
    CARD = "card"
    WALLET = "wallet"
    UPI = "upi"
    NETBANKING = "netbanking"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class OfferType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BOGO = "bogo"
    FREE_SHIPPING = "free_shipping"


class AddressType(str, Enum):
    HOME = "home"
    WORK = "work"
    OTHER = "other"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ThemeLayout(str, Enum):
    GRID = "grid"
    LIST = "list"
    MASONRY = "masonry"


def choices(enum_cls):
    return [member.value for member in enum_cls]
