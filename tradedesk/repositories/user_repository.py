from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.user import AppUserEntity
from tradedesk.models.base import AccountStatus
from tradedesk.models.user import UserAccount


class UserRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.user")

    def create(
        self,
        username: str,
        password_hash: str,
        wallet_balance: Decimal,
        admin_id: Optional[int] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> AppUserEntity:
        """
        Adds a new end user to the session and flushes it to get an id.
        The caller owns the commit.
        """
        self.logger.info(f"Creating user: username={username}, admin_id={admin_id}")

        user = AppUserEntity(
            username=username,
            password_hash=password_hash,
            name=name,
            email=email,
            mobile=mobile,
            wallet_balance=wallet_balance,
            admin_id=admin_id,
            status=AccountStatus.ACTIVE,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def get_by_id(self, user_id: int) -> Optional[AppUserEntity]:
        self.logger.debug(f"Fetching user by id: {user_id}")
        return self.db.query(AppUserEntity).filter(AppUserEntity.id == user_id).first()

    def query_for_update(self, user_id: int) -> Query:
        return (
            self.db.query(AppUserEntity)
            .filter(AppUserEntity.id == user_id)
            .populate_existing()
            .with_for_update()
        )

    def get_by_id_for_update(self, user_id: int) -> Optional[AppUserEntity]:
        """
        Fetches the user row with a row-level lock held until the end of the
        current transaction. Concurrent wallet mutations of the same user
        queue up here.
        """
        self.logger.debug(f"Locking user row: {user_id}")
        return self.query_for_update(user_id).first()

    def get_by_username(self, username: str) -> Optional[AppUserEntity]:
        return self.db.query(AppUserEntity).filter(AppUserEntity.username == username).first()

    def get_all(self) -> List[AppUserEntity]:
        return self.db.query(AppUserEntity).order_by(AppUserEntity.id).all()

    def get_all_by_admin(self, admin_id: int) -> List[AppUserEntity]:
        users = (
            self.db.query(AppUserEntity)
            .filter(AppUserEntity.admin_id == admin_id)
            .order_by(AppUserEntity.id)
            .all()
        )
        self.logger.debug(f"Found {len(users)} users for admin {admin_id}")
        return users

    def count_by_admin(self, admin_id: int) -> int:
        return (
            self.db.query(func.count(AppUserEntity.id))
            .filter(AppUserEntity.admin_id == admin_id)
            .scalar()
        )

    def to_model(self, entity: AppUserEntity) -> UserAccount:
        return UserAccount(
            id=entity.id,
            username=entity.username,
            name=entity.name,
            email=entity.email,
            mobile=entity.mobile,
            status=entity.status,
            created_at=entity.created_at,
            wallet_balance=entity.wallet_balance,
            admin_id=entity.admin_id,
        )
