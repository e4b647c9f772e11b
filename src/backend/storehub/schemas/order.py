from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from storehub.models.mongodb.enums import OrderPaymentStatus, OrderStatus


class OrderStatusUpdateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: OrderStatus
    payment_status: Optional[OrderPaymentStatus] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    notes: Optional[str] = None
