"""Environment-driven settings for servicedesk."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_HOME_DIR = ".servicedesk"
DEFAULT_DB_FILE = "servicedesk.db"
DEFAULT_SESSION_FILE = "session"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_BCRYPT_ROUNDS = 12


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    database_path: str
    session_file: str
    log_level: str
    bcrypt_rounds: int


def get_home_dir() -> Path:
    """Return ~/.servicedesk, creating it if needed."""
    home_dir = Path.home() / DEFAULT_HOME_DIR
    home_dir.mkdir(exist_ok=True)
    return home_dir


def load_settings(
    database_path: Optional[str] = None,
    session_file: Optional[str] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """Build settings from explicit values, then environment, then defaults.

    Args:
        database_path: Overrides SERVICEDESK_DB_PATH
        session_file: Overrides SERVICEDESK_SESSION_FILE
        log_level: Overrides SERVICEDESK_LOG_LEVEL

    Returns:
        Settings instance
    """
    database_path = database_path or os.environ.get("SERVICEDESK_DB_PATH")
    if database_path is None:
        database_path = str(get_home_dir() / DEFAULT_DB_FILE)

    session_file = session_file or os.environ.get("SERVICEDESK_SESSION_FILE")
    if session_file is None:
        session_file = str(get_home_dir() / DEFAULT_SESSION_FILE)

    log_level = log_level or os.environ.get("SERVICEDESK_LOG_LEVEL", DEFAULT_LOG_LEVEL)

    return Settings(
        database_path=database_path,
        session_file=session_file,
        log_level=log_level.upper(),
        bcrypt_rounds=get_bcrypt_rounds(),
    )


def get_bcrypt_rounds() -> int:
    """Return the bcrypt cost factor from SERVICEDESK_BCRYPT_ROUNDS."""
    rounds_env = os.environ.get("SERVICEDESK_BCRYPT_ROUNDS")
    if not rounds_env:
        return DEFAULT_BCRYPT_ROUNDS
    try:
        rounds = int(rounds_env)
    except ValueError:
        raise ValueError(f"SERVICEDESK_BCRYPT_ROUNDS must be an integer, got '{rounds_env}'")
    if not 4 <= rounds <= 31:
        raise ValueError(f"SERVICEDESK_BCRYPT_ROUNDS must be between 4 and 31, got {rounds}")
    return rounds
