"""User accounts with bcrypt password hashes."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

import bcrypt

from .db import Database

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password123"

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt ignores (or rejects) anything longer


class UsernameTakenError(Exception):
    """Raised when signing up with a username that already exists."""


@dataclass(frozen=True, slots=True)
class User:
    id: int
    username: str

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username}


class UserStore:
    """Users table access. Password hashes never leave this class."""

    def __init__(self, db: Database, rounds: int = 12) -> None:
        self._db = db
        self._rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"no-such-user", bcrypt.gensalt(rounds=rounds))

    def create(self, username: str, password: str) -> User:
        """Create a user. Raises UsernameTakenError if the name is in use."""
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds))
        try:
            with self._db.transaction() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                    (username, password_hash.decode()),
                )
        except sqlite3.IntegrityError as e:
            raise UsernameTakenError(username) from e
        logger.info("Created user %s", username)
        return User(id=cursor.lastrowid, username=username)

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the user if the password matches, else None.

        Unknown usernames and wrong passwords are indistinguishable.
        """
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT id, username, password_hash FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        # Unknown users still pay for one hash check so timing matches
        password_hash = row["password_hash"].encode() if row else self._dummy_hash
        try:
            matches = bcrypt.checkpw(password.encode(), password_hash)
        except ValueError:
            return None
        if row is None or not matches:
            return None
        return User(id=row["id"], username=row["username"])

    def get(self, user_id: int) -> User | None:
        with self._db.transaction() as conn:
            row = conn.execute("SELECT id, username FROM users WHERE id = ?", (user_id,)).fetchone()
        return User(id=row["id"], username=row["username"]) if row else None

    def count(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    def ensure_default_user(
        self, username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD
    ) -> User | None:
        """Create the demo account when there are no users yet."""
        if self.count() > 0:
            return None
        user = self.create(username, password)
        logger.info("Created default user: %s", username)
        return user
