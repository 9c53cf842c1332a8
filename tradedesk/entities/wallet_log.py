from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Enum

from tradedesk.entities.base import BaseEntity, utcnow
from tradedesk.models.base import WalletDirection


class WalletLogEntity(BaseEntity):
    __tablename__ = "wallet_logs"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("app_users.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    change_amount = Column(Numeric(18, 2), nullable=False)
    transaction_type = Column(Enum(WalletDirection), nullable=False)
    remarks = Column(String(255))
    timestamp = Column(DateTime(timezone=True), default=utcnow)
