from .base import (
    Role,
    AccountStatus,
    OrderType,
    OrderStatus,
    OrderAction,
    WalletDirection,
)
from .user import (
    Principal,
    UserAccount,
    AdminAccount,
    SuperAdminAccount,
    Account,
    NewAdmin,
    NewUser,
    SuperAdminNewUser,
    AdminDetails,
    LoginRequest,
    LoginResponse,
)
from .commodity import Commodity, PriceOverride, TickResult
from .order import PlaceOrderBody, ProcessOrderBody, Order
from .wallet import WalletAdjustBody, WalletBalance, WalletLog
from .notification import Notification
from .error import ErrorBody, ErrorResponse

__all__ = [
    "Role",
    "AccountStatus",
    "OrderType",
    "OrderStatus",
    "OrderAction",
    "WalletDirection",
    "Principal",
    "UserAccount",
    "AdminAccount",
    "SuperAdminAccount",
    "Account",
    "NewAdmin",
    "NewUser",
    "SuperAdminNewUser",
    "AdminDetails",
    "LoginRequest",
    "LoginResponse",
    "Commodity",
    "PriceOverride",
    "TickResult",
    "PlaceOrderBody",
    "ProcessOrderBody",
    "Order",
    "WalletAdjustBody",
    "WalletBalance",
    "WalletLog",
    "Notification",
    "ErrorBody",
    "ErrorResponse",
]
