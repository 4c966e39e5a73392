from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .errors import InvalidArgumentError, ResourceNotFoundError
from .models import ResourceRecord


class _Scored(NamedTuple):
    resource: ResourceRecord
    score: int


def popularity_score(
    resource: ResourceRecord, config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> int:
    """Engagement heuristic used when the reference resource has no tags."""
    return resource.download_count * config.download_weight + resource.view_count * config.view_weight


def _by_popularity(
    reference: ResourceRecord,
    resources: list[ResourceRecord],
    config: ScoringConfig,
) -> list[_Scored]:
    scored = [
        _Scored(r, popularity_score(r, config))
        for r in resources
        if r.id != reference.id
    ]
    # sorted() is stable, so equal scores keep snapshot order
    return sorted(scored, key=lambda s: -s.score)


def _by_tag_overlap(
    reference: ResourceRecord, resources: list[ResourceRecord],
) -> list[_Scored]:
    reference_tags = reference.tag_ids
    scored: list[_Scored] = []
    for r in resources:
        if r.id == reference.id or not r.tags:
            continue
        common = len(r.tag_ids & reference_tags)
        if common:
            scored.append(_Scored(r, common))
    return sorted(
        scored,
        key=lambda s: (-s.score, -(s.resource.average_rating or 0.0)),
    )


def recommend(
    resources: Iterable[ResourceRecord],
    reference_id: int,
    limit: int = DEFAULT_SCORING_CONFIG.default_limit,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[ResourceRecord]:
    """
    Rank resources related to the one identified by *reference_id*.

    A tagged reference ranks other tagged resources by the number of tag ids
    they share with it, then by average rating (missing ratings count as 0).
    Resources sharing no tag are dropped. An untagged reference ranks every
    other resource by popularity instead. Ties keep snapshot order.

    Raises ``InvalidArgumentError`` for a non-positive *limit* and
    ``ResourceNotFoundError`` when *reference_id* is not in the snapshot.
    """
    if limit <= 0:
        raise InvalidArgumentError(f"limit must be positive, got {limit}")

    snapshot = list(resources)
    reference = next((r for r in snapshot if r.id == reference_id), None)
    if reference is None:
        raise ResourceNotFoundError(reference_id)

    if reference.tags:
        ranked = _by_tag_overlap(reference, snapshot)
    else:
        ranked = _by_popularity(reference, snapshot, config)

    return [s.resource for s in ranked[:limit]]
