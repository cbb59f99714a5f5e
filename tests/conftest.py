"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import pytest

# Add backend to Python path
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

DB_ENV_VARS = ("DB_SCHEMA_FILE", "DB_AUTO_SEED", "DB_SEED_FILE", "PORT")


@pytest.fixture(autouse=True)
def clean_db_env(monkeypatch):
    """Keep schema and seed settings from leaking in from the environment."""
    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Don't pick up a developer's .env file
    monkeypatch.chdir(Path(__file__).parent)


@pytest.fixture
def db():
    """An unseeded store."""
    from vulnshop.core.config import Settings
    from vulnshop.core.database import Database

    database = Database(Settings(DB_AUTO_SEED="0"))
    yield database
    database.close()


@pytest.fixture
def write_sql(tmp_path):
    """Write SQL text to a temp file and return its path."""
    counter = {"n": 0}

    def _write(sql: str, name: str = None) -> str:
        counter["n"] += 1
        path = tmp_path / (name or f"script-{counter['n']}.sql")
        path.write_text(sql)
        return str(path)

    return _write
