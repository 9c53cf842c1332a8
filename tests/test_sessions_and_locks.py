from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.dialects import postgresql

from tradedesk.core.database import get_db, timed_session
from tradedesk.repositories.order_repository import OrderRepository
from tradedesk.repositories.user_repository import UserRepository
from tradedesk.services.settlement_service import SettlementService
from tradedesk.services.wallet_service import WalletService


def compiled(query):
    return str(query.statement.compile(dialect=postgresql.dialect()))


def test_each_request_gets_its_own_session():
    first, second = get_db(), get_db()
    try:
        assert next(first) is not next(second)
    finally:
        first.close()
        second.close()


def test_finished_request_does_not_discard_another_requests_work(db, user):
    finished, in_flight = get_db(), get_db()
    next(finished)
    session = next(in_flight)

    WalletService(session).apply(user.id, "100.00", "DEBIT")
    finished.close()
    session.commit()
    in_flight.close()

    with timed_session() as fresh:
        assert Decimal(UserRepository(fresh).get_by_id(user.id).wallet_balance) == Decimal("9900.00")


def test_wallet_row_is_locked_for_update(db):
    assert "FOR UPDATE" in compiled(UserRepository(db).query_for_update(1))


def test_order_row_is_locked_for_update(db):
    assert "FOR UPDATE" in compiled(OrderRepository(db).query_for_update(1))


def test_approval_locks_order_before_wallet(db, user, gold):
    service = SettlementService(db)
    order = service.place_order(user.id, gold.id, 1, "BUY")

    locked = []
    lock_order = service.order_repo.get_by_id_for_update
    lock_user = service.wallet.user_repo.get_by_id_for_update

    def order_lock(order_id):
        locked.append("order")
        return lock_order(order_id)

    def user_lock(user_id):
        locked.append("user")
        return lock_user(user_id)

    with patch.object(service.order_repo, "get_by_id_for_update", side_effect=order_lock), \
            patch.object(service.wallet.user_repo, "get_by_id_for_update", side_effect=user_lock):
        service.process_order(order.id, "approve")

    assert locked == ["order", "user"]


def test_wallet_adjustments_lock_the_user_row(db, user):
    service = WalletService(db)

    with patch.object(
        service.user_repo, "get_by_id_for_update", wraps=service.user_repo.get_by_id_for_update
    ) as lock:
        service.adjust(user.id, "10.00", "CREDIT")
        service.adjust(user.id, "5.00", "DEBIT")

    assert [c.args for c in lock.call_args_list] == [(user.id,), (user.id,)]
