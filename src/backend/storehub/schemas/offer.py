from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storehub.models.mongodb.enums import OfferType


class OfferCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = ""
    type: OfferType
    value: float = Field(ge=0)
    code: Optional[str] = None
    min_order_value: float = 0
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    applicable_products: List[str] = []
    applicable_categories: List[str] = []
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    is_public: bool = True


class OfferUpdateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[OfferType] = None
    value: Optional[float] = Field(default=None, ge=0)
    code: Optional[str] = None
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    applicable_products: Optional[List[str]] = None
    applicable_categories: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None
