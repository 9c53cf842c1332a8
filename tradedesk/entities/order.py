from sqlalchemy import Column, Integer, Numeric, ForeignKey, DateTime, Enum, CheckConstraint

from tradedesk.entities.base import BaseEntity, utcnow
from tradedesk.models.base import OrderType, OrderStatus


class OrderEntity(BaseEntity):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="order_quantity_positive_check"),
        {"extend_existing": True}
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("app_users.id"), nullable=False, index=True)
    commodity_id = Column(Integer, ForeignKey("commodities.id"), nullable=False)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True, index=True)
    type = Column(Enum(OrderType), nullable=False)
    quantity = Column(Numeric(18, 4), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow)
    processed_at = Column(DateTime(timezone=True), nullable=True)
