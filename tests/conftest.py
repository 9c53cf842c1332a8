import os

os.environ.setdefault("DB_CONN_STRING", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from decimal import Decimal

import pytest

from tradedesk.core.database import SessionLocal, engine
from tradedesk.core.security import hash_password
from tradedesk.entities import BaseEntity
from tradedesk.repositories.admin_repository import AdminRepository, SuperAdminRepository
from tradedesk.repositories.commodity_repository import CommodityRepository
from tradedesk.repositories.user_repository import UserRepository

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def schema():
    BaseEntity.metadata.create_all(bind=engine)
    yield
    BaseEntity.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def super_admin(db):
    entity = SuperAdminRepository(db).create("root", hash_password(PASSWORD))
    db.commit()
    return entity


@pytest.fixture
def admin(db, super_admin):
    entity = AdminRepository(db).create("admin1", hash_password(PASSWORD), created_by=super_admin.id)
    db.commit()
    return entity


@pytest.fixture
def make_user(db, admin):
    def _make(username="user1", balance="10000.00", admin_id=admin.id):
        entity = UserRepository(db).create(
            username=username,
            password_hash=hash_password(PASSWORD),
            wallet_balance=Decimal(balance),
            admin_id=admin_id,
        )
        db.commit()
        return entity

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def make_commodity(db):
    def _make(name="Gold", unit="oz", price="2000.00"):
        entity = CommodityRepository(db).create(name, unit, Decimal(price))
        db.commit()
        return entity

    return _make


@pytest.fixture
def gold(make_commodity):
    return make_commodity()


@pytest.fixture
def silver(make_commodity):
    return make_commodity("Silver", "oz", "25.50")
