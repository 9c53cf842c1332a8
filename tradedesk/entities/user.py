from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum

from tradedesk.entities.base import BaseEntity, utcnow
from tradedesk.models.base import AccountStatus


class AppUserEntity(BaseEntity):
    __tablename__ = "app_users"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255))
    email = Column(String(255))
    mobile = Column(String(32))
    wallet_balance = Column(Numeric(18, 2), nullable=False, default=0)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True, index=True)
    status = Column(Enum(AccountStatus), nullable=False, default=AccountStatus.ACTIVE)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
