from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tradedesk.main import app
from tradedesk.models.base import AccountStatus
from tests.conftest import PASSWORD

API = "/api/v1"


@pytest.fixture
def client():
    return TestClient(app)


def login(client, username):
    resp = client.post(f"{API}/auth/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def user_headers(client, user):
    return login(client, "user1")


@pytest.fixture
def admin_headers(client, admin):
    return login(client, "admin1")


@pytest.fixture
def root_headers(client, super_admin):
    return login(client, "root")


def test_health(client):
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_login_returns_tagged_account(client, user):
    resp = client.post(f"{API}/auth/login", json={"username": "user1", "password": PASSWORD})

    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["account"]["role"] == "user"
    assert Decimal(body["account"]["wallet_balance"]) == Decimal("10000.00")


def test_bad_credentials(client, user):
    resp = client.post(f"{API}/auth/login", json={"username": "user1", "password": "wrong-one"})

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTHENTICATION_FAILED"


def test_me(client, admin_headers):
    resp = client.get(f"{API}/auth/me", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"
    assert resp.json()["username"] == "admin1"


def test_missing_token(client):
    resp = client.get(f"{API}/commodities")
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_buy_flow_end_to_end(client, user_headers, admin_headers, user, gold, admin):
    resp = client.post(
        f"{API}/orders",
        json={"commodity_id": gold.id, "quantity": "3", "type": "BUY"},
        headers=user_headers,
    )
    assert resp.status_code == 200, resp.text
    order = resp.json()
    assert order["status"] == "PENDING"
    assert Decimal(order["price"]) == Decimal("2000.00")

    notes = client.get(f"{API}/notifications/admin/{admin.id}", headers=admin_headers).json()
    assert [n["message"] for n in notes] == ["New BUY request by user: user1"]

    resp = client.put(
        f"{API}/orders/{order['id']}/process", json={"action": "approve"}, headers=admin_headers
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "APPROVED"

    logs = client.get(f"{API}/wallet/{user.id}/logs", headers=user_headers).json()
    assert len(logs) == 1
    assert logs[0]["transaction_type"] == "DEBIT"
    assert Decimal(logs[0]["change_amount"]) == Decimal("6000.00")
    assert logs[0]["order_id"] == order["id"]

    me = client.get(f"{API}/auth/me", headers=user_headers).json()
    assert Decimal(me["wallet_balance"]) == Decimal("4000.00")

    resp = client.put(
        f"{API}/orders/{order['id']}/process", json={"action": "reject"}, headers=admin_headers
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


def test_insufficient_funds_is_distinct(client, admin_headers, make_user, gold):
    buyer = make_user("buyer", balance="10.00")
    order = client.post(
        f"{API}/orders",
        json={"commodity_id": gold.id, "quantity": "1", "type": "BUY", "user_id": buyer.id},
        headers=admin_headers,
    ).json()

    resp = client.put(
        f"{API}/orders/{order['id']}/process", json={"action": "approve"}, headers=admin_headers
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INSUFFICIENT_FUNDS"
    orders = client.get(f"{API}/orders", headers=admin_headers).json()
    assert orders[0]["status"] == "PENDING"


def test_user_cannot_order_for_someone_else(client, user_headers, make_user, gold):
    other = make_user("other")

    resp = client.post(
        f"{API}/orders",
        json={"commodity_id": gold.id, "quantity": "1", "type": "BUY", "user_id": other.id},
        headers=user_headers,
    )

    assert resp.status_code == 403


def test_admin_must_name_the_user(client, admin_headers, gold):
    resp = client.post(
        f"{API}/orders", json={"commodity_id": gold.id, "quantity": "1", "type": "BUY"}, headers=admin_headers
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ARGUMENT"


def test_invalid_order_input(client, user_headers, gold):
    resp = client.post(
        f"{API}/orders", json={"commodity_id": gold.id, "quantity": "-2", "type": "BUY"}, headers=user_headers
    )
    assert resp.status_code == 400

    resp = client.post(
        f"{API}/orders", json={"commodity_id": 999, "quantity": "1", "type": "BUY"}, headers=user_headers
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_users_cannot_process_orders(client, user_headers, user, gold):
    order = client.post(
        f"{API}/orders", json={"commodity_id": gold.id, "quantity": "1", "type": "SELL"}, headers=user_headers
    ).json()

    resp = client.put(f"{API}/orders/{order['id']}/process", json={"action": "approve"}, headers=user_headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "PERMISSION_DENIED"


def test_my_orders(client, user_headers, gold):
    client.post(f"{API}/orders", json={"commodity_id": gold.id, "quantity": "1", "type": "SELL"}, headers=user_headers)

    resp = client.get(f"{API}/orders/mine", headers=user_headers)

    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_wallet_adjust(client, admin_headers, user):
    resp = client.post(
        f"{API}/wallet/adjust",
        json={"user_id": user.id, "amount": "500", "direction": "SUBTRACT"},
        headers=admin_headers,
    )

    assert resp.status_code == 200, resp.text
    assert Decimal(resp.json()["balance"]) == Decimal("9500.00")

    resp = client.post(
        f"{API}/wallet/adjust",
        json={"user_id": user.id, "amount": "0", "direction": "CREDIT"},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_wallet_logs_are_private(client, user_headers, make_user):
    other = make_user("other")

    resp = client.get(f"{API}/wallet/{other.id}/logs", headers=user_headers)

    assert resp.status_code == 403


def test_commodity_price_override(client, admin_headers, user_headers, gold):
    resp = client.put(f"{API}/commodities/{gold.id}/price", json={"price": "1850.5"}, headers=admin_headers)
    assert resp.status_code == 200
    assert Decimal(resp.json()["current_price"]) == Decimal("1850.50")

    resp = client.put(f"{API}/commodities/{gold.id}/price", json={"price": "1"}, headers=user_headers)
    assert resp.status_code == 403

    prices = client.get(f"{API}/commodities", headers=user_headers).json()
    assert Decimal(prices[0]["current_price"]) == Decimal("1850.50")


def test_mark_notification_read(client, admin_headers, user_headers, admin, gold):
    client.post(f"{API}/orders", json={"commodity_id": gold.id, "quantity": "1", "type": "BUY"}, headers=user_headers)
    note = client.get(f"{API}/notifications/admin/{admin.id}", headers=admin_headers).json()[0]

    resp = client.put(f"{API}/notifications/{note['id']}/read", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["read_status"] is True
    assert client.get(f"{API}/notifications/admin/{admin.id}", headers=admin_headers).json() == []


def test_admin_creates_own_user(client, admin_headers, admin):
    resp = client.post(
        f"{API}/admin/users",
        json={"username": "newbie", "password": "hunter22", "initial_wallet_balance": "100"},
        headers=admin_headers,
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["admin_id"] == admin.id
    users = client.get(f"{API}/admin/{admin.id}/users", headers=admin_headers).json()
    assert [u["username"] for u in users] == ["newbie"]


def test_superadmin_directory(client, root_headers, admin_headers):
    resp = client.post(
        f"{API}/superadmin/admins", json={"username": "desk2", "password": "hunter22"}, headers=root_headers
    )
    assert resp.status_code == 200, resp.text
    desk2 = resp.json()

    resp = client.post(
        f"{API}/superadmin/users",
        json={"username": "trader", "password": "hunter22", "admin_id": desk2["id"]},
        headers=root_headers,
    )
    assert resp.status_code == 200, resp.text

    details = client.get(f"{API}/superadmin/admins/{desk2['id']}/details", headers=root_headers).json()
    assert details["user_count"] == 1
    assert len(client.get(f"{API}/superadmin/admins", headers=root_headers).json()) == 2
    assert len(client.get(f"{API}/superadmin/users", headers=root_headers).json()) == 1

    resp = client.post(
        f"{API}/superadmin/admins", json={"username": "desk2", "password": "hunter22"}, headers=root_headers
    )
    assert resp.status_code == 409

    resp = client.get(f"{API}/superadmin/admins", headers=admin_headers)
    assert resp.status_code == 403


def test_deactivated_user_cannot_keep_trading(client, user_headers, db, user, gold):
    user.status = AccountStatus.INACTIVE
    db.commit()

    resp = client.post(
        f"{API}/orders", json={"commodity_id": gold.id, "quantity": "1", "type": "BUY"}, headers=user_headers
    )

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTHENTICATION_FAILED"
