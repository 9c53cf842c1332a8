from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
import logging
import time
import contextlib
from typing import Any, Dict
import threading
from datetime import datetime

from tradedesk.core.config import settings

logger = logging.getLogger("sqlalchemy.pool")

# Checked-out connections, keyed by DBAPI connection id
active_transactions: Dict[int, datetime] = {}
transactions_lock = threading.Lock()


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool settings per backend.

    PostgreSQL gets a pooled engine with TCP keepalives. SQLite is only used
    for tests and local runs, where every session must share one connection
    so an in-memory database survives between sessions.
    """
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": 20,
        "max_overflow": 40,
        "pool_pre_ping": True,
        "pool_recycle": 600,
        "pool_timeout": 30,
        "pool_use_lifo": True,
        "connect_args": {
            'connect_timeout': 10,
            'keepalives': 1,
            'keepalives_idle': 60,
            'keepalives_interval': 10,
            'keepalives_count': 5,
            'application_name': 'tradedesk'
        },
    }


engine = create_engine(
    settings.DB_CONN_STRING,
    echo=settings.DB_ECHO,
    **_engine_options(settings.DB_CONN_STRING)
)


@event.listens_for(engine, "checkout")
def checkout_handler(dbapi_conn, conn_record, conn_proxy):
    try:
        conn_record.info['checkout_time'] = time.time()
        with transactions_lock:
            active_transactions[id(dbapi_conn)] = datetime.now()
        logger.debug(f"Connection checked out. In use: {len(active_transactions)}")
    except Exception as e:
        logger.error(f"Connection checkout monitoring failed: {e}")


@event.listens_for(engine, "checkin")
def checkin_handler(dbapi_conn, conn_record):
    try:
        with transactions_lock:
            active_transactions.pop(id(dbapi_conn), None)
        checkout_time = conn_record.info.pop('checkout_time', None)
        if checkout_time is not None:
            duration = time.time() - checkout_time
            if duration > 2.0:
                logger.warning(f"Long transaction: {duration:.2f}s")
        logger.debug(f"Connection returned to pool. In use: {len(active_transactions)}")
    except Exception as e:
        logger.error(f"Connection checkin monitoring failed: {e}")


# A fresh session per request or background job
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False
)


@contextlib.contextmanager
def timed_session():
    """Session for background jobs that run outside a request."""
    start = time.time()
    session = SessionLocal()
    try:
        yield session
        duration = time.time() - start
        if duration > 0.1:
            logger.info(f"DB work finished in {duration:.3f}s")
    except (DBAPIError, SQLAlchemyError) as e:
        logger.error(f"DB error ({time.time() - start:.3f}s): {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """
    FastAPI dependency yielding a fresh session for one request.
    The session is closed, and its connection returned to the pool, when the
    request finishes.
    """
    start_time = time.time()
    db = SessionLocal()
    try:
        yield db
    except DBAPIError as e:
        logger.error(f"DB error: {str(e)}. Elapsed: {time.time() - start_time:.3f}s")
        raise
    finally:
        db.close()
        duration = time.time() - start_time
        if duration > 0.5:
            logger.warning(f"Slow request session: {duration:.3f}s")
