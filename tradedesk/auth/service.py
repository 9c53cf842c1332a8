from typing import Optional, Tuple, Union

from sqlalchemy.orm import Session

from tradedesk.core.exceptions import AuthenticationError
from tradedesk.core.logging import setup_logger
from tradedesk.core.security import create_access_token, decode_access_token, verify_password
from tradedesk.entities.admin import AdminEntity, SuperAdminEntity
from tradedesk.entities.user import AppUserEntity
from tradedesk.models.base import AccountStatus, Role
from tradedesk.models.user import Account, LoginResponse, Principal
from tradedesk.repositories.admin_repository import AdminRepository, SuperAdminRepository
from tradedesk.repositories.user_repository import UserRepository

AccountEntity = Union[AppUserEntity, AdminEntity, SuperAdminEntity]


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.admin_repo = AdminRepository(db)
        self.super_admin_repo = SuperAdminRepository(db)
        self.logger = setup_logger("tradedesk.services.auth")

    def login(self, username: str, password: str) -> LoginResponse:
        """
        Verifies credentials against users, then admins, then super admins,
        and issues a bearer token for the matching account.
        """
        found = self._find_by_username(username)
        if found is None or not verify_password(password, found[0].password_hash):
            self.logger.warning(f"Failed login for username {username}")
            raise AuthenticationError("Invalid credentials")

        entity, role = found
        if entity.status != AccountStatus.ACTIVE:
            self.logger.warning(f"Login attempt for inactive account {username}")
            raise AuthenticationError("Account is inactive")

        token = create_access_token(entity.username, role.value, entity.id)
        self.logger.info(f"Login succeeded: username={username}, role={role.value}")
        return LoginResponse(access_token=token, account=self._to_account(entity, role))

    def resolve_principal(self, token: str) -> Principal:
        """
        Turns a bearer token into the caller's identity.

        Raises:
            AuthenticationError: bad or expired token, deleted or renamed
                account, or an account deactivated after the token was issued
        """
        payload = decode_access_token(token)
        try:
            role = Role(payload["role"])
        except ValueError:
            raise AuthenticationError("Invalid token role")
        principal = Principal(id=int(payload["uid"]), username=payload["sub"], role=role)
        self._load_active(principal)
        return principal

    def get_current_account(self, principal: Principal) -> Account:
        return self._to_account(self._load_active(principal), principal.role)

    def _load_active(self, principal: Principal) -> AccountEntity:
        entity = self._find_by_id(principal.id, principal.role)
        if entity is None or entity.username != principal.username:
            raise AuthenticationError("Account no longer exists")
        if entity.status != AccountStatus.ACTIVE:
            self.logger.warning(f"Token presented for inactive account {principal.username}")
            raise AuthenticationError("Account is inactive")
        return entity

    def _find_by_username(self, username: str) -> Optional[Tuple[AccountEntity, Role]]:
        user = self.user_repo.get_by_username(username)
        if user:
            return user, Role.USER
        admin = self.admin_repo.get_by_username(username)
        if admin:
            return admin, Role.ADMIN
        super_admin = self.super_admin_repo.get_by_username(username)
        if super_admin:
            return super_admin, Role.SUPER_ADMIN
        return None

    def _find_by_id(self, account_id: int, role: Role) -> Optional[AccountEntity]:
        if role == Role.USER:
            return self.user_repo.get_by_id(account_id)
        if role == Role.ADMIN:
            return self.admin_repo.get_by_id(account_id)
        return self.super_admin_repo.get_by_id(account_id)

    def _to_account(self, entity: AccountEntity, role: Role) -> Account:
        if role == Role.USER:
            return self.user_repo.to_model(entity)
        if role == Role.ADMIN:
            return self.admin_repo.to_model(entity)
        return self.super_admin_repo.to_model(entity)
