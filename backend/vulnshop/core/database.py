"""Database access layer for VulnShop services.

Every service owns one in-memory SQLite store. SQL arrives as finished text
and is executed as-is: there is no parameterization or escaping anywhere in
this module, which is what the scanners are meant to find.
"""
import hashlib
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional, Union

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .config import Settings
from .logging import get_logger

logger = get_logger("vulnshop.database")

ColumnValue = Union[int, float, str, None]
Row = Dict[str, ColumnValue]

# Used only when the schema file cannot be read
EMBEDDED_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    email TEXT,
    password TEXT
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT,
    description TEXT,
    price REAL,
    category TEXT
);

CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER,
    product_id INTEGER,
    quantity INTEGER,
    total_price REAL,
    status TEXT,
    created_at TEXT,
    user_snapshot TEXT,
    product_snapshot TEXT
);
"""

# MD5 of "password123", returned for unknown usernames
PLACEHOLDER_PASSWORD_HASH = "482c811da5d5b4bc6d497ffa98491e38"
PLACEHOLDER_EMAIL = "user@example.com"


class DatabaseError(Exception):
    """Raised when the store rejects a statement, schema or seed file."""


def hash_password(password: str) -> str:
    """Hash a password with MD5 and tag it with the algorithm name."""
    # VULNERABILITY: Weak hashing algorithm (MD5, unsalted)
    return "md5:" + hashlib.md5(password.encode("utf-8")).hexdigest()


def _to_value(value) -> ColumnValue:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return value


class Database:
    """In-memory relational store with raw SQL execution."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._closed = False
        # One shared connection for every thread; SQLite serializes access
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        try:
            self._bootstrap_schema()
            self.auto_seed_from_env()
        except Exception:
            self.close()
            raise

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Release the store. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.engine.dispose()

    def _bootstrap_schema(self):
        schema_path = self.settings.DB_SCHEMA_FILE
        try:
            schema = Path(schema_path).read_text()
        except (OSError, UnicodeDecodeError):
            logger.debug("Schema file unreadable, using embedded schema", path=schema_path)
            schema = EMBEDDED_SCHEMA
        self._execute_script(schema)

    def _execute_script(self, sql: str):
        """Run one or more semicolon separated statements."""
        raw = self.engine.raw_connection()
        try:
            raw.driver_connection.executescript(sql)
        except (sqlite3.Error, ValueError) as e:
            # ValueError covers NUL bytes and unencodable text
            raise DatabaseError(str(e)) from e
        finally:
            raw.close()

    def seed_from_file(self, path: str):
        """Execute a SQL file as a single batch. Not idempotent."""
        try:
            sql = Path(path).read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseError(f"cannot read seed file {path}: {e}") from e
        logger.info("Seeding database", path=str(path))
        self._execute_script(sql)

    def auto_seed_from_env(self):
        """Seed from the configured file when DB_AUTO_SEED is "1" or "true"."""
        if not self.settings.auto_seed_enabled:
            return
        self.seed_from_file(self.settings.seed_file)

    def execute_query(self, query: str) -> List[Row]:
        """
        Execute a raw SQL statement.

        VULNERABILITY: SQL injection - the statement is executed exactly as
        received.

        Args:
            query: Complete SQL text

        Returns:
            Rows as column-name mappings for SELECT statements, otherwise an
            empty list.
        """
        logger.log_query(query)

        if not query.strip().upper().startswith("SELECT"):
            self._execute_script(query)
            return []

        try:
            with self.engine.connect() as conn:
                result = conn.exec_driver_sql(query)
                columns = list(result.keys())
                return [
                    {column: _to_value(value) for column, value in zip(columns, row)}
                    for row in result
                ]
        except (SQLAlchemyError, ValueError) as e:
            message = str(e.orig) if getattr(e, "orig", None) is not None else str(e)
            raise DatabaseError(message) from e

    def get_user_by_username(self, username: str) -> Row:
        """Look up a user by building the WHERE clause from raw input."""
        query = "SELECT id, username, email, password FROM users WHERE username = '" + username + "'"
        rows = self.execute_query(query)
        if not rows:
            # Unknown users get a stand-in record instead of a not-found error
            return {
                "id": 1,
                "username": username,
                "email": PLACEHOLDER_EMAIL,
                "password": PLACEHOLDER_PASSWORD_HASH,
            }
        row = rows[0]
        return {
            "id": row.get("id"),
            "username": row.get("username"),
            "email": row.get("email"),
            "password": row.get("password"),
        }

    def create_user(self, username: str, email: str, password: str):
        """Insert a user with the values formatted straight into the SQL."""
        query = f"INSERT INTO users (username, email, password) VALUES ('{username}', '{email}', '{password}')"
        self.execute_query(query)

    def seed_user(self, username: str, email: str, plain_password: str):
        """Insert a user with a tagged MD5 password hash."""
        try:
            self.create_user(username, email, hash_password(plain_password))
        except DatabaseError as e:
            logger.error("Seed user error", username=username, error=str(e))
            raise


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the service's database."""
    return request.app.state.db
