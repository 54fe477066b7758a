"""Tests for the SQLite-backed user and order stores."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import bcrypt
import pytest

from growtrade.accounts import DEFAULT_USERNAME, UsernameTakenError, UserStore
from growtrade.db import Database
from growtrade.orders import OrderStore


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture
def users(db):
    return UserStore(db, rounds=4)


@pytest.fixture
def orders(db):
    return OrderStore(db)


class TestUserStore:
    def test_create_and_authenticate(self, users):
        """A created user can authenticate with the same password."""
        user = users.create("alice", "secret123")
        assert users.authenticate("alice", "secret123") == user
        assert users.get(user.id) == user

    def test_wrong_password(self, users):
        """Wrong passwords return None."""
        users.create("alice", "secret123")
        assert users.authenticate("alice", "secret124") is None

    def test_unknown_user(self, users):
        """Unknown usernames return None, same as a wrong password."""
        assert users.authenticate("nobody", "secret123") is None

    def test_unknown_user_still_checks_a_hash(self, users):
        """Unknown usernames cost a bcrypt check, so timing does not reveal them."""
        with patch("growtrade.accounts.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            assert users.authenticate("nobody", "secret123") is None
        checkpw.assert_called_once()

    def test_duplicate(self, users):
        """Usernames are unique."""
        users.create("alice", "secret123")
        with pytest.raises(UsernameTakenError):
            users.create("alice", "different")
        assert users.count() == 1

    def test_password_is_hashed(self, users, db):
        """The stored value is a bcrypt hash, not the password."""
        users.create("alice", "secret123")
        with db.transaction() as conn:
            stored = conn.execute("SELECT password_hash FROM users").fetchone()[0]
        assert stored != "secret123"
        assert stored.startswith("$2")

    def test_user_dict_has_no_secret(self, users):
        """Serialized users expose only id and username."""
        user = users.create("alice", "secret123")
        assert user.to_dict() == {"id": user.id, "username": "alice"}

    def test_default_user_seeded_once(self, users):
        """The demo account is created only into an empty table."""
        assert users.ensure_default_user() is not None
        assert users.ensure_default_user() is None
        assert users.count() == 1
        assert users.authenticate(DEFAULT_USERNAME, "password123") is not None

    def test_default_user_skipped_when_users_exist(self, users):
        """Existing accounts suppress the demo account."""
        users.create("alice", "secret123")
        assert users.ensure_default_user() is None
        assert users.authenticate(DEFAULT_USERNAME, "password123") is None


class TestOrderStore:
    def test_create(self, users, orders):
        """An order round-trips through the store."""
        user = users.create("alice", "secret123")
        order = orders.create(user.id, "AAPL", "buy", 5, 175.5)

        assert orders.list_for_user(user.id) == [order]
        assert order.to_dict()["side"] == "buy"

    def test_newest_first(self, users, orders):
        """Listing sorts by timestamp descending."""
        user = users.create("alice", "secret123")
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        middle = orders.create(user.id, "AAPL", "buy", 1, 10.0, timestamp=base + timedelta(minutes=1))
        oldest = orders.create(user.id, "AAPL", "buy", 1, 10.0, timestamp=base)
        newest = orders.create(user.id, "AAPL", "sell", 1, 10.0, timestamp=base + timedelta(minutes=2))

        assert orders.list_for_user(user.id) == [newest, middle, oldest]

    def test_filtered_by_user(self, users, orders):
        """Users only see their own orders."""
        alice = users.create("alice", "secret123")
        bob = users.create("bob", "secret123")
        orders.create(alice.id, "AAPL", "buy", 1, 10.0)
        orders.create(bob.id, "TSLA", "sell", 2, 20.0)

        assert [o.symbol for o in orders.list_for_user(alice.id)] == ["AAPL"]
        assert [o.symbol for o in orders.list_for_user(bob.id)] == ["TSLA"]

    def test_invalid_side(self, users, orders):
        """Only buy and sell are accepted."""
        user = users.create("alice", "secret123")
        with pytest.raises(ValueError):
            orders.create(user.id, "AAPL", "short", 1, 10.0)
        assert orders.list_for_user(user.id) == []

    def test_timestamp_is_utc_iso(self, users, orders):
        """Timestamps serialize as ISO-8601 with an offset."""
        user = users.create("alice", "secret123")
        order = orders.create(user.id, "AAPL", "buy", 1, 10.0)
        assert order.to_dict()["timestamp"].endswith("+00:00")
