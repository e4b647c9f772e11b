from mongoengine import EmbeddedDocument, fields

from ..enums import ThemeLayout, choices
from .base import TenantDocument


class GeneralSettings(EmbeddedDocument):
    store_name = fields.StringField(default="")
    store_description = fields.StringField(default="")
    logo = fields.StringField(default="")
    banner = fields.StringField(default="")
    tagline = fields.StringField(default="")
    support_email = fields.StringField(default="")
    support_phone = fields.StringField(default="")
    timezone = fields.StringField(default="Asia/Kolkata")
    currency = fields.StringField(default="INR")
    language = fields.StringField(default="en")


class PaymentSettings(EmbeddedDocument):
    cod_enabled = fields.BooleanField(default=True)
    online_payment_enabled = fields.BooleanField(default=False)


class ShippingSettings(EmbeddedDocument):
    free_shipping_enabled = fields.BooleanField(default=False)
    free_shipping_above = fields.FloatField(default=0, min_value=0)
    charges = fields.FloatField(default=0, min_value=0)
    delivery_time = fields.StringField(default="3-5 business days")


class TaxSettings(EmbeddedDocument):
    enabled = fields.BooleanField(default=False)
    rate = fields.FloatField(default=0, min_value=0, max_value=100)
    inclusive = fields.BooleanField(default=False)


class SocialSettings(EmbeddedDocument):
    facebook = fields.StringField(default="")
    instagram = fields.StringField(default="")
    twitter = fields.StringField(default="")
    youtube = fields.StringField(default="")
    whatsapp = fields.StringField(default="")


class ThemeSettings(EmbeddedDocument):
    primary_color = fields.StringField(default="#000000")
    secondary_color = fields.StringField(default="#ffffff")
    layout = fields.StringField(choices=choices(ThemeLayout), default=ThemeLayout.GRID.value)


class Settings(TenantDocument):
    """Per-store settings. One document per tenant database."""

    general = fields.EmbeddedDocumentField(GeneralSettings, default=GeneralSettings)
    payment = fields.EmbeddedDocumentField(PaymentSettings, default=PaymentSettings)
    shipping = fields.EmbeddedDocumentField(ShippingSettings, default=ShippingSettings)
    tax = fields.EmbeddedDocumentField(TaxSettings, default=TaxSettings)
    social = fields.EmbeddedDocumentField(SocialSettings, default=SocialSettings)
    theme = fields.EmbeddedDocumentField(ThemeSettings, default=ThemeSettings)

    meta = {"collection": "settings"}

    # Sections exposed on the public storefront
    public_sections = ("general", "shipping", "social", "theme")

    def to_public_dict(self) -> dict:
        data = self.to_serializable_dict()
        return {section: data.get(section, {}) for section in self.public_sections}
