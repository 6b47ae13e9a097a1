"""
Runtime configuration for the hiring core.

Values come from environment variables (optionally from a .env file via
python-dotenv). Everything has a working default, so the library runs
without any configuration at all.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class Settings:
    """
    Process-wide settings.

    Attributes:
        log_level: Level used by setup_logging() when none is passed
        data_dir: Directory holding the versioned JSON reference tables
        batch_workers: Thread pool size for batch candidate scoring
    """
    log_level: str = "INFO"
    data_dir: Path = DEFAULT_DATA_DIR
    batch_workers: int = 4

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from HIRING_CORE_* environment variables."""
        data_dir = os.getenv("HIRING_CORE_DATA_DIR")
        workers = os.getenv("HIRING_CORE_BATCH_WORKERS", "")
        return cls(
            log_level=os.getenv("HIRING_CORE_LOG_LEVEL", "INFO").upper(),
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            batch_workers=int(workers) if workers.isdigit() and int(workers) > 0 else 4,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    load_dotenv()
    return Settings.from_env()


def reset_settings() -> None:
    """Drop cached settings (and cached tables) so the next read reloads them."""
    get_settings.cache_clear()
    from .tables import clear_table_cache
    clear_table_cache()
