from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime

from tradedesk.entities.base import BaseEntity, utcnow


class NotificationEntity(BaseEntity):
    __tablename__ = "notifications"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True, index=True)
    message = Column(String(500), nullable=False)
    read_status = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
