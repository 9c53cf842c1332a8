from .base import BaseEntity
from .admin import AdminEntity, SuperAdminEntity
from .user import AppUserEntity
from .commodity import CommodityEntity
from .order import OrderEntity
from .wallet_log import WalletLogEntity
from .notification import NotificationEntity

__all__ = [
    "BaseEntity",
    "SuperAdminEntity",
    "AdminEntity",
    "AppUserEntity",
    "CommodityEntity",
    "OrderEntity",
    "WalletLogEntity",
    "NotificationEntity",
]
