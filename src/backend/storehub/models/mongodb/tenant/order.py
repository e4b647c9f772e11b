import time

from mongoengine import EmbeddedDocument, fields

from ..enums import OrderPaymentMethod, OrderPaymentStatus, OrderStatus, choices
from ..utils import datetime_utc_now, random_code
from .base import TenantDocument


class ShippingAddress(EmbeddedDocument):
    street = fields.StringField()
    city = fields.StringField()
    state = fields.StringField()
    zip_code = fields.StringField()
    country = fields.StringField()


class CustomerInfo(EmbeddedDocument):
    name = fields.StringField()
    email = fields.StringField()
    phone = fields.StringField()
    address = fields.EmbeddedDocumentField(ShippingAddress)


class OrderItem(EmbeddedDocument):
    product = fields.ObjectIdField(required=True)
    name = fields.StringField()
    price = fields.FloatField(min_value=0)
    quantity = fields.IntField(min_value=1, default=1)
    total = fields.FloatField(min_value=0)


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random_code(4)}"


class Order(TenantDocument):
    order_number = fields.StringField(unique=True)
    customer = fields.ObjectIdField(required=True)
    customer_info = fields.EmbeddedDocumentField(CustomerInfo)
    items = fields.EmbeddedDocumentListField(OrderItem, default=list)

    subtotal = fields.FloatField(required=True, min_value=0)
    tax = fields.FloatField(default=0, min_value=0)
    shipping = fields.FloatField(default=0, min_value=0)
    discount = fields.FloatField(default=0, min_value=0)
    total = fields.FloatField(required=True, min_value=0)

    status = fields.StringField(choices=choices(OrderStatus), default=OrderStatus.PENDING.value)
    payment_status = fields.StringField(choices=choices(OrderPaymentStatus), default=OrderPaymentStatus.PENDING.value)
    payment_method = fields.StringField(choices=choices(OrderPaymentMethod), default=OrderPaymentMethod.COD.value)

    notes = fields.StringField()
    tracking_number = fields.StringField()
    estimated_delivery = fields.DateTimeField()
    delivered_at = fields.DateTimeField()

    meta = {
        "collection": "orders",
        "indexes": ["customer", "status", "payment_status", "-created_at"],
    }

    def clean(self):
        if not self.order_number:
            self.order_number = generate_order_number()
        if self.status == OrderStatus.DELIVERED.value and not self.delivered_at:
            self.delivered_at = datetime_utc_now()
