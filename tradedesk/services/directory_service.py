from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tradedesk.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from tradedesk.core.logging import setup_logger
from tradedesk.core.security import hash_password
from tradedesk.entities.admin import AdminEntity
from tradedesk.entities.commodity import CommodityEntity
from tradedesk.entities.user import AppUserEntity
from tradedesk.models.base import to_cents
from tradedesk.models.user import AdminAccount, AdminDetails, NewAdmin, NewUser, UserAccount
from tradedesk.repositories.admin_repository import AdminRepository, SuperAdminRepository
from tradedesk.repositories.commodity_repository import CommodityRepository
from tradedesk.repositories.user_repository import UserRepository


class DirectoryService:
    """Accounts of all three tiers. Usernames are unique across tiers."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.admin_repo = AdminRepository(db)
        self.super_admin_repo = SuperAdminRepository(db)
        self.commodity_repo = CommodityRepository(db)
        self.logger = setup_logger("tradedesk.services.directory")

    def find_user_by_id(self, user_id: int) -> AppUserEntity:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            self.logger.warning(f"User with id {user_id} not found")
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def find_admin_by_id(self, admin_id: int) -> AdminEntity:
        admin = self.admin_repo.get_by_id(admin_id)
        if not admin:
            self.logger.warning(f"Admin with id {admin_id} not found")
            raise NotFoundError(f"Admin with id {admin_id} not found")
        return admin

    def find_commodity_by_id(self, commodity_id: int) -> CommodityEntity:
        commodity = self.commodity_repo.get_by_id(commodity_id)
        if not commodity:
            raise NotFoundError(f"Commodity with id {commodity_id} not found")
        return commodity

    def create_admin(self, body: NewAdmin, created_by: Optional[int] = None) -> AdminAccount:
        self.logger.info(f"Creating admin {body.username}, created_by={created_by}")
        self._ensure_username_available(body.username)

        try:
            admin = self.admin_repo.create(
                username=body.username,
                password_hash=hash_password(body.password),
                created_by=created_by,
                name=body.name,
                email=body.email,
                mobile=body.mobile,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Username {body.username} is already taken")
        except Exception as e:
            self.logger.error(f"Failed to create admin {body.username}: {str(e)}")
            self.db.rollback()
            raise

        self.logger.info(f"Admin created: id={admin.id}, username={admin.username}")
        return self.admin_repo.to_model(admin)

    def create_user(self, body: NewUser, admin_id: Optional[int] = None) -> UserAccount:
        """
        Creates an end user, optionally owned by an admin.

        Raises:
            NotFoundError: admin_id does not exist
            InvalidArgumentError: negative initial wallet balance
            ConflictError: username already taken
        """
        self.logger.info(f"Creating user {body.username}, admin_id={admin_id}")

        if admin_id is not None:
            self.find_admin_by_id(admin_id)

        try:
            balance = Decimal(body.initial_wallet_balance)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidArgumentError("Invalid initial wallet balance")
        if not balance.is_finite() or balance < 0:
            raise InvalidArgumentError(
                "Initial wallet balance cannot be negative",
                details={"initial_wallet_balance": str(body.initial_wallet_balance)},
            )

        self._ensure_username_available(body.username)

        try:
            user = self.user_repo.create(
                username=body.username,
                password_hash=hash_password(body.password),
                wallet_balance=to_cents(balance),
                admin_id=admin_id,
                name=body.name,
                email=body.email,
                mobile=body.mobile,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Username {body.username} is already taken")
        except Exception as e:
            self.logger.error(f"Failed to create user {body.username}: {str(e)}")
            self.db.rollback()
            raise

        self.logger.info(f"User created: id={user.id}, username={user.username}")
        return self.user_repo.to_model(user)

    def list_users(self) -> List[UserAccount]:
        return [self.user_repo.to_model(u) for u in self.user_repo.get_all()]

    def list_users_by_admin(self, admin_id: int) -> List[UserAccount]:
        self.find_admin_by_id(admin_id)
        return [self.user_repo.to_model(u) for u in self.user_repo.get_all_by_admin(admin_id)]

    def list_admins(self) -> List[AdminAccount]:
        return [self.admin_repo.to_model(a) for a in self.admin_repo.get_all()]

    def get_admin_details(self, admin_id: int) -> AdminDetails:
        admin = self.find_admin_by_id(admin_id)
        return AdminDetails(
            admin=self.admin_repo.to_model(admin),
            user_count=self.user_repo.count_by_admin(admin_id),
        )

    def _ensure_username_available(self, username: str) -> None:
        taken = (
            self.user_repo.get_by_username(username)
            or self.admin_repo.get_by_username(username)
            or self.super_admin_repo.get_by_username(username)
        )
        if taken:
            self.logger.warning(f"Username {username} is already taken")
            raise ConflictError(f"Username {username} is already taken")
