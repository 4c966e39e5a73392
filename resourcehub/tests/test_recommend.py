from __future__ import annotations

import pytest

from resourcehub.discovery import (
    InvalidArgumentError,
    ResourceNotFoundError,
    ResourceRecord,
    TagRef,
    recommend,
)
from resourcehub.discovery.config import ScoringConfig
from resourcehub.discovery.recommend import popularity_score

MATH = TagRef(id=1, name="math")
AI = TagRef(id=2, name="ai")
PHYSICS = TagRef(id=3, name="physics")


def _res(rid, tags=(), rating=None, downloads=0, views=0):
    return ResourceRecord(
        id=rid,
        title=f"Resource {rid}",
        tags=tuple(tags),
        average_rating=rating,
        download_count=downloads,
        view_count=views,
    )


@pytest.fixture
def scenario():
    a = _res(1, [MATH, AI], downloads=5, views=10)
    b = _res(2, [AI], rating=4.0)
    c = _res(3, [], downloads=50, views=100)
    d = _res(4, [MATH, AI], rating=3.0)
    return a, b, c, d


def test_more_shared_tags_rank_first(scenario):
    a, b, c, d = scenario
    result = recommend([a, b, c, d], reference_id=a.id, limit=10)
    assert [r.id for r in result] == [d.id, b.id]


def test_untagged_candidates_are_excluded_for_tagged_reference(scenario):
    a, b, c, d = scenario
    assert c not in recommend([a, b, c, d], a.id)


def test_rating_breaks_overlap_ties():
    ref = _res(1, [MATH])
    low = _res(2, [MATH], rating=2.5)
    high = _res(3, [MATH], rating=4.5)
    unrated = _res(4, [MATH])
    result = recommend([ref, unrated, low, high], ref.id)
    assert [r.id for r in result] == [3, 2, 4]


def test_full_ties_keep_input_order():
    ref = _res(1, [MATH])
    others = [_res(i, [MATH], rating=3.0) for i in (7, 5, 9)]
    result = recommend([ref, *others], ref.id)
    assert [r.id for r in result] == [7, 5, 9]


def test_no_shared_tags_yields_empty_result():
    ref = _res(1, [MATH])
    result = recommend([ref, _res(2, [PHYSICS]), _res(3, [])], ref.id)
    assert result == []


def test_untagged_reference_falls_back_to_popularity():
    ref = _res(1, [], downloads=100, views=100)
    quiet = _res(2, [MATH], downloads=1, views=1)
    popular = _res(3, [], downloads=10, views=5)
    viewed = _res(4, [AI], downloads=0, views=20)
    result = recommend([ref, quiet, popular, viewed], ref.id)
    # scores: quiet 3, popular 25, viewed 20
    assert [r.id for r in result] == [3, 4, 2]


def test_popularity_ties_keep_input_order():
    ref = _res(1)
    first = _res(2, downloads=5)
    second = _res(3, views=10)
    assert [r.id for r in recommend([ref, first, second], ref.id)] == [2, 3]


def test_reference_is_never_returned(scenario):
    a, b, c, d = scenario
    for ref in scenario:
        assert ref.id not in [r.id for r in recommend(scenario, ref.id)]


def test_limit_truncates():
    ref = _res(1, [MATH])
    others = [_res(i, [MATH]) for i in range(2, 12)]
    assert len(recommend([ref, *others], ref.id, limit=3)) == 3
    assert len(recommend([ref, *others], ref.id)) == 10


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_is_rejected(scenario, limit):
    with pytest.raises(InvalidArgumentError):
        recommend(scenario, scenario[0].id, limit=limit)


def test_unknown_reference_raises_not_found(scenario):
    with pytest.raises(ResourceNotFoundError) as excinfo:
        recommend(scenario, reference_id=999, limit=5)
    assert excinfo.value.resource_id == 999


def test_popularity_weights_are_configurable():
    resource = _res(1, downloads=3, views=4)
    assert popularity_score(resource) == 10
    assert popularity_score(resource, ScoringConfig(download_weight=1, view_weight=3)) == 15


def test_duplicate_tag_ids_are_collapsed():
    resource = _res(1, [MATH, TagRef(id=1, name="math"), AI])
    assert [t.id for t in resource.tags] == [1, 2]
