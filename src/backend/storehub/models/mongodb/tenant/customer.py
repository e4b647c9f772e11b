from mongoengine import EmbeddedDocument, ValidationError, fields

from ..enums import AddressType, Gender, choices
from .base import TenantDocument


class Address(EmbeddedDocument):
    type = fields.StringField(choices=choices(AddressType), default=AddressType.HOME.value)
    name = fields.StringField(required=True)
    phone = fields.StringField(required=True)
    street = fields.StringField(required=True)
    city = fields.StringField(required=True)
    state = fields.StringField(required=True)
    zip_code = fields.StringField(required=True)
    country = fields.StringField(default="India")
    is_default = fields.BooleanField(default=False)


class CustomerPreferences(EmbeddedDocument):
    notifications = fields.BooleanField(default=True)
    marketing = fields.BooleanField(default=False)
    newsletter = fields.BooleanField(default=False)
    sms_updates = fields.BooleanField(default=True)


class Customer(TenantDocument):
    name = fields.StringField(required=True, max_length=100)
    email = fields.EmailField(required=True, unique=True)
    phone = fields.StringField(regex=r"^\+?[0-9]{10,15}$")
    password = fields.StringField()
    addresses = fields.EmbeddedDocumentListField(Address, default=list)
    date_of_birth = fields.DateTimeField()
    gender = fields.StringField(choices=choices(Gender))

    total_spent = fields.FloatField(default=0, min_value=0)
    total_orders = fields.IntField(default=0, min_value=0)
    loyalty_points = fields.IntField(default=0, min_value=0)
    last_order_date = fields.DateTimeField()
    preferences = fields.EmbeddedDocumentField(CustomerPreferences, default=CustomerPreferences)

    is_active = fields.BooleanField(default=True)
    is_verified = fields.BooleanField(default=False)
    email_verified = fields.BooleanField(default=False)
    phone_verified = fields.BooleanField(default=False)
    last_login_at = fields.DateTimeField()
    notes = fields.StringField(default="")

    meta = {
        "collection": "customers",
        "indexes": ["phone", "is_active", "-created_at"],
    }

    def clean(self):
        if self.email:
            self.email = self.email.strip().lower()
        if sum(1 for address in self.addresses if address.is_default) > 1:
            raise ValidationError("Only one address can be marked as default")
