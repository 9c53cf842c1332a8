from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class Commodity(BaseModel):
    id: int
    name: str
    unit: str
    current_price: Decimal
    last_updated: Optional[datetime] = None


class PriceOverride(BaseModel):
    price: Decimal


class TickResult(BaseModel):
    updated: int
    failed: int = 0
