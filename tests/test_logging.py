import logging

import pytest

from tradedesk.core.logging import SensitiveDataFilter, mask_sensitive
from tradedesk.core.security import create_access_token, hash_password


def test_masks_bearer_tokens():
    token = create_access_token("user1", "user", 1)

    masked = mask_sensitive(f"Authorization: Bearer {token}")

    assert token not in masked
    assert masked == "Authorization: Bearer <jwt>"


def test_masks_password_hashes():
    hashed = hash_password("hunter22")

    assert mask_sensitive(f"loaded hash {hashed}") == "loaded hash <bcrypt>"


def test_masks_database_credentials():
    masked = mask_sensitive("DB error on postgresql+psycopg2://trader:s3cr3t@db:5432/tradedesk")

    assert "s3cr3t" not in masked
    assert "postgresql+psycopg2://trader:***@db:5432/tradedesk" in masked


@pytest.mark.parametrize(
    "text",
    ['{"username": "user1", "password": "hunter22"}', "SECRET_KEY=hunter22", "password = hunter22"],
)
def test_masks_key_value_secrets(text):
    assert "hunter22" not in mask_sensitive(text)


def test_leaves_ordinary_messages_alone():
    text = "Order 7 placed: user=3, BUY 2 x Gold @ 2000.00, admin=1"
    assert mask_sensitive(text) == text
    assert mask_sensitive("sqlite+pysqlite:///:memory:") == "sqlite+pysqlite:///:memory:"


def test_filter_masks_message_and_args():
    record = logging.LogRecord(
        "tradedesk.test", logging.INFO, __file__, 1, "login with %s and %d", ("password=hunter22", 3), None
    )

    assert SensitiveDataFilter().filter(record) is True
    assert record.getMessage() == "login with password=*** and 3"
