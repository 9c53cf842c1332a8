from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from tradedesk.models.base import WalletDirection


class WalletAdjustBody(BaseModel):
    user_id: int
    amount: Decimal
    direction: str


class WalletBalance(BaseModel):
    user_id: int
    balance: Decimal


class WalletLog(BaseModel):
    id: int
    user_id: int
    order_id: Optional[int] = None
    change_amount: Decimal
    transaction_type: WalletDirection
    remarks: Optional[str] = None
    timestamp: Optional[datetime] = None
