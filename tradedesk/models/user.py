from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from tradedesk.models.base import AccountStatus, Role


class Principal(BaseModel):
    """Identity and role of an authenticated caller"""
    id: int
    username: str
    role: Role


class AccountBase(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    status: AccountStatus
    created_at: Optional[datetime] = None


class UserAccount(AccountBase):
    role: Literal["user"] = "user"
    wallet_balance: Decimal
    admin_id: Optional[int] = None


class AdminAccount(AccountBase):
    role: Literal["admin"] = "admin"
    created_by: Optional[int] = None


class SuperAdminAccount(AccountBase):
    role: Literal["super_admin"] = "super_admin"


Account = Union[UserAccount, AdminAccount, SuperAdminAccount]


class NewAdmin(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6, max_length=72)
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None


class NewUser(NewAdmin):
    initial_wallet_balance: Decimal = Decimal("0")


class SuperAdminNewUser(NewUser):
    admin_id: Optional[int] = None


class AdminDetails(BaseModel):
    admin: AdminAccount
    user_count: int


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: Account = Field(discriminator="role")
