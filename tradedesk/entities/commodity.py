from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint

from tradedesk.entities.base import BaseEntity, utcnow


class CommodityEntity(BaseEntity):
    __tablename__ = "commodities"
    __table_args__ = (
        CheckConstraint("current_price >= 0.01", name="commodity_price_floor_check"),
        {"extend_existing": True}
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    unit = Column(String(32), nullable=False)
    current_price = Column(Numeric(18, 2), nullable=False)
    last_updated = Column(DateTime(timezone=True), default=utcnow)
