from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storehub.models.mongodb.enums import ThemeLayout


class GeneralSettingsSchema(BaseModel):
    store_name: Optional[str] = None
    store_description: Optional[str] = None
    logo: Optional[str] = None
    banner: Optional[str] = None
    tagline: Optional[str] = None
    support_email: Optional[str] = None
    support_phone: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None


class PaymentSettingsSchema(BaseModel):
    cod_enabled: Optional[bool] = None
    online_payment_enabled: Optional[bool] = None


class ShippingSettingsSchema(BaseModel):
    free_shipping_enabled: Optional[bool] = None
    free_shipping_above: Optional[float] = Field(default=None, ge=0)
    charges: Optional[float] = Field(default=None, ge=0)
    delivery_time: Optional[str] = None


class TaxSettingsSchema(BaseModel):
    enabled: Optional[bool] = None
    rate: Optional[float] = Field(default=None, ge=0, le=100)
    inclusive: Optional[bool] = None


class SocialSettingsSchema(BaseModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    whatsapp: Optional[str] = None


class ThemeSettingsSchema(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    layout: Optional[ThemeLayout] = None


class SettingsUpdateRequest(BaseModel):
    """Sections and fields left out of the request keep their current values"""

    general: Optional[GeneralSettingsSchema] = None
    payment: Optional[PaymentSettingsSchema] = None
    shipping: Optional[ShippingSettingsSchema] = None
    tax: Optional[TaxSettingsSchema] = None
    social: Optional[SocialSettingsSchema] = None
    theme: Optional[ThemeSettingsSchema] = None
