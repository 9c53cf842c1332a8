from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum

from tradedesk.entities.base import BaseEntity, utcnow
from tradedesk.models.base import AccountStatus


class SuperAdminEntity(BaseEntity):
    __tablename__ = "super_admins"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255))
    email = Column(String(255))
    mobile = Column(String(32))
    status = Column(Enum(AccountStatus), nullable=False, default=AccountStatus.ACTIVE)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class AdminEntity(BaseEntity):
    __tablename__ = "admins"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255))
    email = Column(String(255))
    mobile = Column(String(32))
    status = Column(Enum(AccountStatus), nullable=False, default=AccountStatus.ACTIVE)
    created_by = Column(Integer, ForeignKey("super_admins.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
