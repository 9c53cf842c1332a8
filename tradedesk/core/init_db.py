import secrets
from decimal import Decimal

from sqlalchemy.orm import Session

from tradedesk.core.config import settings
from tradedesk.core.database import engine
from tradedesk.core.logging import setup_logger
from tradedesk.core.security import hash_password
from tradedesk.entities.base import BaseEntity
from tradedesk.repositories.admin_repository import AdminRepository, SuperAdminRepository
from tradedesk.repositories.commodity_repository import CommodityRepository
from tradedesk.repositories.user_repository import UserRepository

logger = setup_logger("tradedesk.core.init_db")

DEFAULT_COMMODITIES = [
    ("Gold", "oz", Decimal("2000.00")),
    ("Silver", "oz", Decimal("25.50")),
    ("Wheat", "bushel", Decimal("7.25")),
    ("Rice", "cwt", Decimal("15.80")),
    ("Crude Oil", "barrel", Decimal("75.30")),
    ("Copper", "lb", Decimal("4.15")),
    ("Cotton", "lb", Decimal("0.72")),
]


def init_database():
    """Creates all tables"""
    logger.info("Initializing database...")

    try:
        BaseEntity.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create database tables: {str(e)}", exc_info=True)
        raise


def seed_super_admin(db: Session) -> str:
    """
    Creates the super admin account on first start.

    The password comes from SUPERADMIN_PASSWORD; when it is not set a random
    one is generated and written to the log once.

    Returns:
        str: Username of the super admin
    """
    repo = SuperAdminRepository(db)
    username = settings.SUPERADMIN_USERNAME

    existing = repo.get_by_username(username)
    if existing:
        logger.info(f"Super admin already exists: id={existing.id}, username={username}")
        return username

    if settings.SUPERADMIN_PASSWORD:
        password = settings.SUPERADMIN_PASSWORD
        logger.info("Using super admin password from settings")
    else:
        password = secrets.token_urlsafe(12)
        logger.warning(f"SUPERADMIN_PASSWORD not set, generated password for {username}: {password}")

    try:
        super_admin = repo.create(username=username, password_hash=hash_password(password), name="Super Admin")
        db.commit()
    except Exception as e:
        logger.error(f"Failed to create super admin: {str(e)}", exc_info=True)
        db.rollback()
        raise

    logger.info(f"Super admin created: id={super_admin.id}, username={username}")
    return username


def seed_commodities(db: Session) -> int:
    """Inserts the default commodity list into an empty table"""
    repo = CommodityRepository(db)
    if repo.count() > 0:
        logger.info("Commodities already present, skipping seed")
        return 0

    try:
        for name, unit, price in DEFAULT_COMMODITIES:
            repo.create(name=name, unit=unit, price=price)
        db.commit()
    except Exception as e:
        logger.error(f"Failed to seed commodities: {str(e)}", exc_info=True)
        db.rollback()
        raise

    logger.info(f"Seeded {len(DEFAULT_COMMODITIES)} commodities")
    return len(DEFAULT_COMMODITIES)


def seed_sample_data(db: Session) -> None:
    """Demo accounts: admin1 / admin123 owning user1 / user123 with 10000.00"""
    admin_repo = AdminRepository(db)
    user_repo = UserRepository(db)

    if admin_repo.get_by_username("admin1"):
        logger.info("Sample data already present, skipping seed")
        return

    super_admin = SuperAdminRepository(db).get_by_username(settings.SUPERADMIN_USERNAME)

    try:
        admin = admin_repo.create(
            username="admin1",
            password_hash=hash_password("admin123"),
            created_by=super_admin.id if super_admin else None,
            name="Admin One",
            email="admin1@example.com",
        )
        user_repo.create(
            username="user1",
            password_hash=hash_password("user123"),
            wallet_balance=Decimal("10000.00"),
            admin_id=admin.id,
            name="User One",
            email="user1@example.com",
        )
        db.commit()
    except Exception as e:
        logger.error(f"Failed to seed sample data: {str(e)}", exc_info=True)
        db.rollback()
        raise

    logger.info("Sample admin and user created")


def seed_all(db: Session) -> None:
    seed_super_admin(db)
    seed_commodities(db)
    if settings.SEED_SAMPLE_DATA:
        seed_sample_data(db)
