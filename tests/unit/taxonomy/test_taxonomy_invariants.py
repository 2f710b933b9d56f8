from __future__ import annotations

import pytest

from skill_snapshots import taxonomy


def test_validate_mappings_reports_no_issues():
    issues = taxonomy.validate_mappings(strict=False)
    assert issues == []


def test_overall_is_the_first_skill():
    assert taxonomy.SKILL_ACTIVITY_TYPES[0] == taxonomy.OVERALL
    assert len(taxonomy.SKILL_ACTIVITY_TYPES) == 24
    assert taxonomy.is_skill(taxonomy.OVERALL)


@pytest.mark.parametrize(
    "label, kind",
    [
        ("OVERALL", taxonomy.KIND_SKILL),
        ("CONSTRUCTION", taxonomy.KIND_SKILL),
        ("ZULRAH", taxonomy.KIND_BOSS),
        ("CLUE_SCROLLS_ALL", taxonomy.KIND_ACTIVITY),
        ("UNKNOWN", None),
        ("SAILING", None),
    ],
)
def test_get_kind(label, kind):
    assert taxonomy.get_kind(label) == kind


@pytest.mark.parametrize("raw", ["SAILING", "", None, 7, "overall"])
def test_activity_type_from_value_falls_back_to_unknown(raw):
    assert taxonomy.activity_type_from_value(raw) == taxonomy.UNKNOWN


def test_all_activity_types_covers_every_kind():
    every = taxonomy.all_activity_types()
    assert len(every) == len(set(every))
    for kind in taxonomy.KIND_ORDER:
        assert set(taxonomy.all_activity_types(kind=kind)) <= set(every)
    with pytest.raises(ValueError):
        taxonomy.all_activity_types(kind="minigame")
