from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringConfig:
    """
    Tunable constants for related-resource ranking.

    Popularity is ``download_count * download_weight + view_count * view_weight``.
    """

    download_weight: int = 2
    view_weight: int = 1
    default_limit: int = 10


DEFAULT_SCORING_CONFIG = ScoringConfig()
