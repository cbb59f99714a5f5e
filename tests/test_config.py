"""Tests for settings and config file loading."""
import json

from vulnshop.core.config import (
    API_KEY,
    DEFAULT_DB_PASSWORD,
    DEFAULT_SEED_FILE,
    SEEDS_DIR,
    Settings,
    load_config,
)


def test_load_config_defaults():
    settings = load_config()
    assert settings.DATABASE_PASSWORD == DEFAULT_DB_PASSWORD
    assert settings.API_KEY == API_KEY
    assert settings.SNAPSHOT_TIMEOUT == 2.0


def test_load_config_from_json_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "database_host": "testhost",
        "database_port": 3306,
        "server_port": 9090,
    }))

    settings = load_config(str(path))

    assert settings.DATABASE_HOST == "testhost"
    assert settings.DATABASE_PORT == 3306
    assert settings.PORT == 9090
    # Untouched keys keep their defaults
    assert settings.DATABASE_USER == "admin"


def test_load_config_from_yaml_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("database_user: yamluser\nlog_level: DEBUG\n")

    settings = load_config(str(path))

    assert settings.DATABASE_USER == "yamluser"
    assert settings.LOG_LEVEL == "DEBUG"


def test_load_config_missing_file_returns_defaults(tmp_path):
    settings = load_config(str(tmp_path / "nope.json"))
    assert settings.DATABASE_HOST == "localhost"


def test_load_config_malformed_file_is_ignored(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"database_host": ')

    settings = load_config(str(path))

    assert settings.DATABASE_HOST == "localhost"


def test_load_config_invalid_value_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"database_port": "not-a-port"}))

    settings = load_config(str(path))

    assert settings.DATABASE_PORT == 5432


def test_connection_string_exposes_password():
    settings = Settings(DATABASE_HOST="localhost", DATABASE_USER="user", DATABASE_PASSWORD="pass")
    assert settings.connection_string == "user:pass@localhost"


def test_auto_seed_flag_values():
    assert Settings(DB_AUTO_SEED="1").auto_seed_enabled
    assert Settings(DB_AUTO_SEED="TrUe").auto_seed_enabled
    assert not Settings(DB_AUTO_SEED="").auto_seed_enabled
    assert not Settings(DB_AUTO_SEED="yes").auto_seed_enabled
    assert not Settings(DB_AUTO_SEED="2").auto_seed_enabled


def test_seed_file_default():
    assert Settings().seed_file == str(DEFAULT_SEED_FILE)
    assert Settings(DB_SEED_FILE="/tmp/x.sql").seed_file == "/tmp/x.sql"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    assert Settings().JWT_SECRET == "from-env"


def test_with_seed_defaults_fills_unset_values():
    seed = SEEDS_DIR / "users.sql"
    settings = Settings().with_seed_defaults(seed)

    assert settings.DB_AUTO_SEED == "1"
    assert settings.DB_SEED_FILE == str(seed)


def test_with_seed_defaults_keeps_explicit_values():
    settings = Settings(DB_AUTO_SEED="0", DB_SEED_FILE="/tmp/mine.sql")

    updated = settings.with_seed_defaults(SEEDS_DIR / "users.sql")

    assert updated.DB_AUTO_SEED == "0"
    assert updated.DB_SEED_FILE == "/tmp/mine.sql"
