import os
from dataclasses import dataclass
from pathlib import Path

from .catalog import DEFAULT_PAGE_SIZE, STORAGE_KEY
from .storage import BACKENDS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    backend: str = "json"
    data_dir: Path = Path("data")
    page_size: int = DEFAULT_PAGE_SIZE
    storage_key: str = STORAGE_KEY
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def load_settings() -> Settings:
    """Read settings from CANDIDATES_* environment variables."""
    backend = os.getenv("CANDIDATES_BACKEND", "json").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"CANDIDATES_BACKEND must be one of {', '.join(BACKENDS)}, got '{backend}'")
    log_level = os.getenv("CANDIDATES_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        raise ValueError(f"CANDIDATES_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'")
    return Settings(
        backend=backend,
        data_dir=Path(os.getenv("CANDIDATES_DATA_DIR", "data")),
        page_size=_int_env("CANDIDATES_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        storage_key=os.getenv("CANDIDATES_STORAGE_KEY", STORAGE_KEY),
        log_level=log_level,
        log_dir=Path(os.getenv("CANDIDATES_LOG_DIR", "logs")),
    )
