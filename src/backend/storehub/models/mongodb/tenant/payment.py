from mongoengine import fields

from ..enums import PaymentMethod, PaymentStatus, choices
from .base import TenantDocument


class Payment(TenantDocument):
    order = fields.ObjectIdField(required=True)
    customer = fields.ObjectIdField(required=True)
    amount = fields.FloatField(required=True, min_value=0)
    currency = fields.StringField(default="INR")
    method = fields.StringField(required=True, choices=choices(PaymentMethod))
    status = fields.StringField(choices=choices(PaymentStatus), default=PaymentStatus.PENDING.value)
    transaction_id = fields.StringField()
    gateway_transaction_id = fields.StringField()
    gateway = fields.StringField()
    gateway_response = fields.DictField()
    failure_reason = fields.StringField()
    refund_amount = fields.FloatField(default=0, min_value=0)
    refund_reason = fields.StringField()
    refunded_at = fields.DateTimeField()
    processed_at = fields.DateTimeField()
    notes = fields.StringField()

    meta = {
        "collection": "payments",
        "indexes": ["order", "customer", "status", "transaction_id", "-created_at"],
    }
