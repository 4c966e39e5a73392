from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "resourcehub-secret-change-in-production")
    seed_dir: Path = Path(os.getenv("RESOURCEHUB_SEED_DIR", str(_PACKAGE_DATA_DIR)))
    cache_ttl_seconds: float = float(os.getenv("RESOURCEHUB_CACHE_TTL", "300"))
    cache_max_entries: int = 256
    max_events: int = 10_000
    log_level: str = os.getenv("RESOURCEHUB_LOG_LEVEL", "INFO")


DEFAULT_APP_CONFIG = AppConfig()
