from datetime import timedelta
from decimal import Decimal

import pytest

from tradedesk.auth.service import AuthService
from tradedesk.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from tradedesk.core.security import create_access_token, decode_access_token
from tradedesk.models.base import AccountStatus, Role
from tradedesk.models.user import NewAdmin, NewUser, Principal
from tradedesk.repositories.wallet_log_repository import WalletLogRepository
from tradedesk.services.directory_service import DirectoryService
from tests.conftest import PASSWORD


def test_create_admin(db, super_admin):
    created = DirectoryService(db).create_admin(
        NewAdmin(username="desk2", password="hunter22", email="desk2@example.com"),
        created_by=super_admin.id,
    )

    assert created.role == "admin"
    assert created.created_by == super_admin.id
    assert created.status == AccountStatus.ACTIVE


def test_create_user_with_initial_balance_writes_no_log(db, admin):
    created = DirectoryService(db).create_user(
        NewUser(username="trader", password="hunter22", initial_wallet_balance=Decimal("123.456")),
        admin_id=admin.id,
    )

    assert created.wallet_balance == Decimal("123.46")
    assert created.admin_id == admin.id
    assert WalletLogRepository(db).get_all_by_user(created.id) == []


def test_create_user_for_unknown_admin(db):
    with pytest.raises(NotFoundError):
        DirectoryService(db).create_user(NewUser(username="trader", password="hunter22"), admin_id=77)


def test_negative_initial_balance(db, admin):
    with pytest.raises(InvalidArgumentError):
        DirectoryService(db).create_user(
            NewUser(username="trader", password="hunter22", initial_wallet_balance=Decimal("-1")),
            admin_id=admin.id,
        )


@pytest.mark.parametrize("taken", ["root", "admin1", "user1"])
def test_usernames_are_unique_across_tiers(db, user, taken):
    service = DirectoryService(db)
    with pytest.raises(ConflictError):
        service.create_user(NewUser(username=taken, password="hunter22"))
    with pytest.raises(ConflictError):
        service.create_admin(NewAdmin(username=taken, password="hunter22"))


def test_admin_details_counts_owned_users(db, admin, make_user):
    make_user("a")
    make_user("b")
    make_user("c", admin_id=None)
    service = DirectoryService(db)

    details = service.get_admin_details(admin.id)

    assert details.admin.username == "admin1"
    assert details.user_count == 2
    assert [u.username for u in service.list_users_by_admin(admin.id)] == ["a", "b"]
    assert len(service.list_users()) == 3


def test_admin_lookups(db, admin):
    service = DirectoryService(db)
    assert [a.id for a in service.list_admins()] == [admin.id]
    with pytest.raises(NotFoundError):
        service.get_admin_details(999)
    with pytest.raises(NotFoundError):
        service.list_users_by_admin(999)
    with pytest.raises(NotFoundError):
        service.find_commodity_by_id(999)


@pytest.mark.parametrize(
    "username,role",
    [("user1", Role.USER), ("admin1", Role.ADMIN), ("root", Role.SUPER_ADMIN)],
)
def test_login_resolves_each_tier(db, user, username, role):
    response = AuthService(db).login(username, PASSWORD)

    assert response.token_type == "bearer"
    assert response.account.username == username
    assert response.account.role == role.value
    claims = decode_access_token(response.access_token)
    assert claims["sub"] == username
    assert claims["role"] == role.value
    assert claims["uid"] == response.account.id


def test_login_wrong_password(db, user):
    with pytest.raises(AuthenticationError):
        AuthService(db).login("user1", "nope-nope")


def test_login_unknown_user(db):
    with pytest.raises(AuthenticationError):
        AuthService(db).login("ghost", PASSWORD)


def test_login_inactive_account(db, user):
    user.status = AccountStatus.INACTIVE
    db.commit()

    with pytest.raises(AuthenticationError):
        AuthService(db).login("user1", PASSWORD)


def test_expired_token_is_rejected(db, user):
    token = create_access_token("user1", "user", user.id, expires_delta=timedelta(seconds=-1))

    with pytest.raises(AuthenticationError):
        AuthService(db).resolve_principal(token)


def test_tampered_token_is_rejected(db, user):
    token = create_access_token("user1", "user", user.id)

    with pytest.raises(AuthenticationError):
        AuthService(db).resolve_principal(token[:-2] + "xx")


def test_get_account_for_principal(db, user):
    account = AuthService(db).get_current_account(Principal(id=user.id, username="user1", role=Role.USER))
    assert account.wallet_balance == Decimal("10000.00")

    with pytest.raises(AuthenticationError):
        AuthService(db).get_current_account(Principal(id=user.id, username="someone", role=Role.USER))


def test_token_of_deactivated_account_is_rejected(db, user):
    token = AuthService(db).login("user1", PASSWORD).access_token
    assert AuthService(db).resolve_principal(token).id == user.id

    user.status = AccountStatus.INACTIVE
    db.commit()

    with pytest.raises(AuthenticationError):
        AuthService(db).resolve_principal(token)


def test_token_of_deleted_account_is_rejected(db):
    token = create_access_token("ghost", "user", 4242)

    with pytest.raises(AuthenticationError):
        AuthService(db).resolve_principal(token)
