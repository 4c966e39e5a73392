from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import DEFAULT_APP_CONFIG


@dataclass(frozen=True)
class StoreConfig:
    """
    Where the in-memory store reads its seed data from.
    """

    seed_dir: Path = DEFAULT_APP_CONFIG.seed_dir
    resources_filename: str = "resources.csv"
    tags_filename: str = "tags.csv"
    ratings_filename: str = "ratings.csv"

    @property
    def resources_path(self) -> Path:
        return self.seed_dir / self.resources_filename

    @property
    def tags_path(self) -> Path:
        return self.seed_dir / self.tags_filename

    @property
    def ratings_path(self) -> Path:
        return self.seed_dir / self.ratings_filename


DEFAULT_STORE_CONFIG = StoreConfig()
