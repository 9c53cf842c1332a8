from .auth import router as auth_router
from .commodity import router as commodity_router
from .order import router as order_router
from .wallet import router as wallet_router
from .notification import router as notification_router
from .admin import router as admin_router
from .superadmin import router as superadmin_router

__all__ = [
    "auth_router",
    "commodity_router",
    "order_router",
    "wallet_router",
    "notification_router",
    "admin_router",
    "superadmin_router",
]
