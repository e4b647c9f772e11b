from datetime import timezone

from mongoengine import ValidationError, fields

from ..enums import OfferType, choices
from ..utils import datetime_utc_now
from .base import TenantDocument


def _as_aware(value, tzinfo):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=tzinfo)
    return value


class Offer(TenantDocument):
    title = fields.StringField(required=True, max_length=200)
    description = fields.StringField(default="")
    type = fields.StringField(required=True, choices=choices(OfferType))
    value = fields.FloatField(required=True, min_value=0)
    code = fields.StringField(max_length=30)
    min_order_value = fields.FloatField(default=0, min_value=0)
    max_discount = fields.FloatField(min_value=0)
    usage_limit = fields.IntField(min_value=0)
    used_count = fields.IntField(default=0, min_value=0)
    applicable_products = fields.ListField(fields.ObjectIdField())
    applicable_categories = fields.ListField(fields.ObjectIdField())
    start_date = fields.DateTimeField(required=True)
    end_date = fields.DateTimeField(required=True)
    is_active = fields.BooleanField(default=True)
    is_public = fields.BooleanField(default=True)

    meta = {
        "collection": "offers",
        "indexes": ["code", "type", ("is_active", "start_date", "end_date")],
    }

    def clean(self):
        if self.code:
            self.code = self.code.strip().upper()
        if self.start_date and self.end_date and _as_aware(self.end_date, timezone.utc) <= _as_aware(
            self.start_date, timezone.utc
        ):
            raise ValidationError("End date must be after start date")
        if self.type == OfferType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError("Percentage offers cannot exceed 100")

    def is_valid(self, now=None) -> bool:
        now = now or datetime_utc_now()
        start_date = _as_aware(self.start_date, now.tzinfo)
        end_date = _as_aware(self.end_date, now.tzinfo)
        if not self.is_active or not (start_date <= now <= end_date):
            return False
        return self.usage_limit is None or self.used_count < self.usage_limit
