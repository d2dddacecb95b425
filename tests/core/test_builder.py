import logging

import pytest

from group_tree.core.builder import GroupRecord, build_forest, flatten_forest
from group_tree.core.queries import find_by_id, iter_nodes
from group_tree.core.validation import validate


@pytest.fixture
def records():
    return [
        GroupRecord("Organization"),
        GroupRecord("Platform Group", parent="Organization", app_count=12, resource_count=38),
        GroupRecord("Digital Marketing", parent="Platform Group", description="Campaigns"),
        GroupRecord("Operations", parent="Organization"),
        GroupRecord("Partners", parent="N/A"),
    ]


def test_build_forest_nests_by_parent_name(records):
    forest = build_forest(records)

    assert [n.name for n in forest] == ["Organization", "Partners"]
    org = forest[0]
    assert [c.name for c in org.children] == ["Platform Group", "Operations"]
    assert [(n.name, n.level) for n in iter_nodes(forest)] == [
        ("Organization", 0),
        ("Platform Group", 1),
        ("Digital Marketing", 2),
        ("Operations", 1),
        ("Partners", 0),
    ]
    assert validate(forest)


def test_build_forest_generates_ids_in_record_order(records):
    forest = build_forest(records)
    platform = find_by_id(forest, "group-2")
    assert platform.name == "Platform Group"
    assert platform.parent_id == "group-1"
    assert find_by_id(forest, "group-3").parent_id == "group-2"


def test_build_forest_fills_defaults(records):
    forest = build_forest(records)
    org = find_by_id(forest, "group-1")
    assert org.description == "Group: Organization"
    assert (org.app_count, org.resource_count) == (0, 0)
    assert find_by_id(forest, "group-3").description == "Campaigns"
    assert find_by_id(forest, "group-2").app_count == 12


def test_build_forest_breaks_parent_cycles(caplog):
    cyclic = [
        GroupRecord("A", parent="B"),
        GroupRecord("B", parent="A"),
        GroupRecord("C", parent="A"),
        GroupRecord("D", parent="D"),
    ]
    with caplog.at_level(logging.WARNING, logger="group_tree.core.builder"):
        forest = build_forest(cyclic)

    assert [n.name for n in forest] == ["A", "B", "D"]
    assert [c.name for c in forest[0].children] == ["C"]
    assert "cyclic" in caplog.text
    assert validate(forest)


def test_build_forest_empty():
    assert build_forest([]) == []


def test_flatten_forest_emits_name_parent_level(records):
    assert flatten_forest(build_forest(records)) == [
        ("Organization", None, 0),
        ("Platform Group", "Organization", 1),
        ("Digital Marketing", "Platform Group", 2),
        ("Operations", "Organization", 1),
        ("Partners", None, 0),
    ]


def test_group_record_from_host_mapping():
    rec = GroupRecord.from_mapping({
        "Name": "Platform Group",
        "Parent": "Organization",
        "UUID": "123",
        "AppCount": 4,
        "ResourceCount": 9,
    })
    assert rec == GroupRecord("Platform Group", "Organization", None, "123", 4, 9)


def test_group_record_from_snake_case_mapping():
    rec = GroupRecord.from_mapping({"name": "Ops", "parent": None})
    assert rec.name == "Ops"
    assert rec.parent is None
    assert rec.app_count == 0


def test_group_record_requires_name():
    with pytest.raises(ValueError):
        GroupRecord.from_mapping({"Parent": "Organization"})
