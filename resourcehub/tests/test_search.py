from __future__ import annotations

import pytest

from resourcehub.discovery import CategoryRef, ResourceRecord, TagRef, filter_resources


def _res(rid, title, description=None, categories=(), tags=()):
    return ResourceRecord(
        id=rid,
        title=title,
        description=description,
        categories=tuple(CategoryRef(id=i, name=n) for i, n in enumerate(categories, 1)),
        tags=tuple(TagRef(id=i, name=n) for i, n in tags),
    )


@pytest.fixture
def resources():
    return [
        _res(1, "AI Basics", categories=["Computer Science"], tags=[(1, "ai")]),
        _res(2, "Graph Theory", "This course uses AI planners", categories=["Mathematics"]),
        _res(3, "Algebra", categories=["Mathematics"], tags=[(2, "math")]),
        _res(4, "Optics", None, categories=["Physics"], tags=[(3, "Physics"), (2, "math")]),
    ]


def test_no_criteria_returns_input_unchanged(resources):
    assert filter_resources(resources) == resources


def test_blank_criteria_are_ignored(resources):
    assert filter_resources(resources, keyword="   ", category="", tags=["", " "]) == resources


def test_empty_collection_yields_empty_result():
    assert filter_resources([], keyword="ai", category="x", tags=["y"]) == []


def test_missing_collection_is_a_programming_error():
    with pytest.raises(TypeError):
        filter_resources(None)


def test_keyword_matches_title_or_description_case_insensitively(resources):
    result = filter_resources(resources, keyword="ai")
    assert [r.id for r in result] == [1, 2]
    assert all(r.title != "Algebra" for r in result)


def test_keyword_is_trimmed(resources):
    assert [r.id for r in filter_resources(resources, keyword="  optics ")] == [4]


def test_keyword_filter_is_idempotent(resources):
    once = filter_resources(resources, keyword="a")
    assert filter_resources(once, keyword="a") == once


def test_category_matches_case_insensitively(resources):
    result = filter_resources(resources, category="MATHEMATICS")
    assert [r.id for r in result] == [2, 3]


def test_category_requires_exact_name_not_substring(resources):
    assert filter_resources(resources, category="Math") == []


def test_tags_are_ored(resources):
    result = filter_resources(resources, tags=["AI", "physics"])
    assert [r.id for r in result] == [1, 4]
    for r in result:
        assert {t.name.lower() for t in r.tags} & {"ai", "physics"}


def test_single_tag_string_is_accepted(resources):
    assert [r.id for r in filter_resources(resources, tags="MATH")] == [3, 4]


def test_criteria_only_narrow(resources):
    result = filter_resources(resources, keyword="a", category="mathematics", tags=["math"])
    assert [r.id for r in result] == [3]


def test_input_order_is_preserved(resources):
    reversed_input = list(reversed(resources))
    result = filter_resources(reversed_input, tags=["math"])
    assert [r.id for r in result] == [4, 3]
