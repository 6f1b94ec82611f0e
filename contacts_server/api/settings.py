# contacts_server/api/settings.py
import os
import json
from dataclasses import dataclass, field
from typing import Optional

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config", "server.json")
DEFAULT_SECRET_KEY = "changeme-local-dev"


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "contacts"
    secret_key: str = field(default=DEFAULT_SECRET_KEY, repr=False)
    algorithm: str = "HS256"
    # 0 disables the exp claim
    token_expire_minutes: int = 0
    login_secret: str = field(default="secret", repr=False)
    env: str = "dev"


def _read_config_file(path: str) -> dict:
    if not path or not os.path.exists(path):
        return {}
    with open(path) as f:
        return json.load(f)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Build the process-wide Settings once at startup.
    Environment variables win over the JSON config file, which wins over defaults.
    """
    config_data = _read_config_file(config_path or os.getenv("CONTACTS_CONFIG", CONFIG_PATH))

    def value(key, default):
        return os.getenv(key, config_data.get(key, default))

    settings = Settings(
        mongodb_uri=value("MONGODB_URI", Settings.mongodb_uri),
        mongodb_db=value("MONGODB_DB", Settings.mongodb_db),
        secret_key=value("SECRET_KEY", Settings.secret_key),
        algorithm=value("ALGORITHM", Settings.algorithm),
        token_expire_minutes=int(value("TOKEN_EXPIRE_MINUTES", Settings.token_expire_minutes)),
        login_secret=value("LOGIN_SECRET", Settings.login_secret),
        env=value("ENV", Settings.env),
    )

    # Safety checks
    if settings.env != "dev" and settings.secret_key == DEFAULT_SECRET_KEY:
        raise RuntimeError("insecure default SECRET_KEY in non-dev; configure SECRET_KEY")
    return settings
