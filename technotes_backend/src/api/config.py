"""
Application configuration loaded from environment variables (and an
optional .env file).
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from technotes_database.db import DEFAULT_DATABASE_URL

from .security import BCRYPT_ROUNDS

DEFAULT_PORT = 3500
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000"]
_PORT_UPPER_BOUND = 65536


@dataclass
class AppConfig:
    """Holds application configuration."""

    database_url: str = DEFAULT_DATABASE_URL
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    bcrypt_rounds: int = BCRYPT_ROUNDS


def get_env_int(var_name: str, default: int, value_checker=None) -> int:
    """
    Get an environment variable as an integer.

    Raises ValueError if the value is not an integer or fails value_checker.
    """
    value_str = os.getenv(var_name)
    if value_str is None or value_str == "":
        return default

    if not value_str.isnumeric():
        msg = f"Environment variable {var_name} must be an integer, got: {value_str}"
        raise ValueError(msg)

    value = int(value_str)
    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)
    return value


def get_env_list(var_name: str, default: List[str]) -> List[str]:
    """Get a comma separated environment variable as a list of strings."""
    value_str = os.getenv(var_name)
    if not value_str:
        return list(default)
    return [item.strip() for item in value_str.split(",") if item.strip()]


# PUBLIC_INTERFACE
def load_config_from_env(env_file: Optional[str] = ".env") -> AppConfig:
    """
    Loads AppConfig from the environment, reading env_file first when it
    exists. Variables already set in the environment win over the file.
    """
    if env_file:
        load_dotenv(env_file)

    return AppConfig(
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        host=os.getenv("HOST") or "127.0.0.1",
        port=get_env_int("PORT", DEFAULT_PORT, lambda port: 0 < port < _PORT_UPPER_BOUND),
        allowed_origins=get_env_list("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
        log_level=os.getenv("LOG_LEVEL") or "INFO",
        log_dir=os.getenv("LOG_DIR") or None,
        bcrypt_rounds=get_env_int("BCRYPT_ROUNDS", BCRYPT_ROUNDS, lambda rounds: 4 <= rounds <= 31),
    )
