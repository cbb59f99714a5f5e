"""Configuration management for VulnShop."""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic_settings import BaseSettings

# VULNERABILITY: Hardcoded secrets
DEFAULT_DB_PASSWORD = "admin123"
API_KEY = "sk-1234567890abcdef"
JWT_SECRET = "my-secret-key"

PACKAGE_DIR = Path(__file__).parent.parent
DEFAULT_SCHEMA_FILE = PACKAGE_DIR / "core" / "schema.sql"
SEEDS_DIR = PACKAGE_DIR / "seeds"
DEFAULT_SEED_FILE = SEEDS_DIR / "seed.sql"

# Keys accepted in a JSON/YAML config file, mapped to settings fields
CONFIG_FILE_KEYS = {
    "database_host": "DATABASE_HOST",
    "database_port": "DATABASE_PORT",
    "database_user": "DATABASE_USER",
    "database_password": "DATABASE_PASSWORD",
    "server_port": "PORT",
    "log_level": "LOG_LEVEL",
    "api_key": "API_KEY",
    "jwt_secret": "JWT_SECRET",
}


class Settings(BaseSettings):
    """Application settings."""

    PROJECT_NAME: str = "VulnShop - Insecure Microservices Demo"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Database credentials (accepted for compatibility, the store is in-memory)
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "admin"
    DATABASE_PASSWORD: str = DEFAULT_DB_PASSWORD

    # Secrets
    API_KEY: str = API_KEY
    JWT_SECRET: str = JWT_SECRET

    # Server
    PORT: Optional[int] = None

    # Schema and seeding
    DB_SCHEMA_FILE: str = str(DEFAULT_SCHEMA_FILE)
    DB_AUTO_SEED: str = ""
    DB_SEED_FILE: str = ""

    # Service discovery
    USERS_SERVICE_URL: str = "http://localhost:8081"
    PRODUCTS_SERVICE_URL: str = "http://localhost:8082"
    ORDERS_SERVICE_URL: str = "http://localhost:8083"
    SNAPSHOT_TIMEOUT: float = 2.0

    # File handling
    IMAGES_DIR: str = "/var/www/images"
    UPLOAD_DIR: str = "/tmp/uploads"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def auto_seed_enabled(self) -> bool:
        """Only "1" and "true" (any case) turn seeding on."""
        value = self.DB_AUTO_SEED
        return value == "1" or value.lower() == "true"

    @property
    def seed_file(self) -> str:
        return self.DB_SEED_FILE or str(DEFAULT_SEED_FILE)

    @property
    def connection_string(self) -> str:
        # VULNERABILITY: password in plain text
        return f"{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"

    def with_seed_defaults(self, seed_file: Path) -> "Settings":
        """Enable auto-seeding from a service's own seed file unless configured."""
        update: Dict[str, Any] = {}
        if not self.DB_AUTO_SEED:
            update["DB_AUTO_SEED"] = "1"
        if not self.DB_SEED_FILE:
            update["DB_SEED_FILE"] = str(seed_file)
        return self.model_copy(update=update) if update else self


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings, optionally overlaid by a JSON or YAML file.

    A missing or unreadable file returns the defaults and a malformed one is
    ignored, so this never fails.
    """
    settings = Settings()
    if not path:
        return settings

    try:
        with open(path, "r") as f:
            raw = f.read()
    except OSError:
        return settings

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError:
        return settings
    if not isinstance(data, dict):
        return settings

    update = {
        field: data[key]
        for key, field in CONFIG_FILE_KEYS.items()
        if key in data
    }
    # Validate through the model so "3306" and 3306 both land as int
    merged = settings.model_dump()
    merged.update(update)
    try:
        return Settings.model_validate(merged)
    except ValueError:
        return settings
