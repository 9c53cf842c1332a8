from typing import List, Optional

from sqlalchemy.orm import Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.admin import AdminEntity, SuperAdminEntity
from tradedesk.models.base import AccountStatus
from tradedesk.models.user import AdminAccount, SuperAdminAccount


class AdminRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.admin")

    def create(
        self,
        username: str,
        password_hash: str,
        created_by: Optional[int] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> AdminEntity:
        self.logger.info(f"Creating admin: username={username}, created_by={created_by}")
        admin = AdminEntity(
            username=username,
            password_hash=password_hash,
            name=name,
            email=email,
            mobile=mobile,
            created_by=created_by,
            status=AccountStatus.ACTIVE,
        )
        self.db.add(admin)
        self.db.flush()
        return admin

    def get_by_id(self, admin_id: int) -> Optional[AdminEntity]:
        self.logger.debug(f"Fetching admin by id: {admin_id}")
        return self.db.query(AdminEntity).filter(AdminEntity.id == admin_id).first()

    def get_by_username(self, username: str) -> Optional[AdminEntity]:
        return self.db.query(AdminEntity).filter(AdminEntity.username == username).first()

    def get_all(self) -> List[AdminEntity]:
        return self.db.query(AdminEntity).order_by(AdminEntity.id).all()

    def to_model(self, entity: AdminEntity) -> AdminAccount:
        return AdminAccount(
            id=entity.id,
            username=entity.username,
            name=entity.name,
            email=entity.email,
            mobile=entity.mobile,
            status=entity.status,
            created_at=entity.created_at,
            created_by=entity.created_by,
        )


class SuperAdminRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.super_admin")

    def create(self, username: str, password_hash: str, name: Optional[str] = None,
               email: Optional[str] = None) -> SuperAdminEntity:
        self.logger.info(f"Creating super admin: username={username}")
        super_admin = SuperAdminEntity(
            username=username,
            password_hash=password_hash,
            name=name,
            email=email,
            status=AccountStatus.ACTIVE,
        )
        self.db.add(super_admin)
        self.db.flush()
        return super_admin

    def get_by_id(self, super_admin_id: int) -> Optional[SuperAdminEntity]:
        return self.db.query(SuperAdminEntity).filter(SuperAdminEntity.id == super_admin_id).first()

    def get_by_username(self, username: str) -> Optional[SuperAdminEntity]:
        return self.db.query(SuperAdminEntity).filter(SuperAdminEntity.username == username).first()

    def to_model(self, entity: SuperAdminEntity) -> SuperAdminAccount:
        return SuperAdminAccount(
            id=entity.id,
            username=entity.username,
            name=entity.name,
            email=entity.email,
            mobile=entity.mobile,
            status=entity.status,
            created_at=entity.created_at,
        )
