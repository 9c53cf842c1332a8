from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from tradedesk.models.base import OrderType, OrderStatus


class PlaceOrderBody(BaseModel):
    commodity_id: int
    quantity: Decimal
    type: str
    user_id: Optional[int] = None


class ProcessOrderBody(BaseModel):
    action: str


class Order(BaseModel):
    id: int
    user_id: int
    commodity_id: int
    admin_id: Optional[int] = None
    type: OrderType
    quantity: Decimal
    price: Decimal
    status: OrderStatus
    timestamp: Optional[datetime] = None
    processed_at: Optional[datetime] = None
