from dataclasses import replace

from group_tree.core.models import TreeNode
from group_tree.core.queries import (
    collect_ids,
    find_by_id,
    find_parent,
    is_descendant,
    iter_nodes,
    path_to,
    recalculate_levels,
    siblings_of,
)


def test_iter_nodes_is_pre_order(org_forest):
    assert collect_ids(org_forest) == [
        "1", "1-1", "1-1-1", "1-1-1-1", "1-1-1-2", "1-1-2", "1-2", "1-2-1", "2", "2-1",
    ]


def test_find_by_id_deep_and_missing(org_forest):
    node = find_by_id(org_forest, "1-1-1-2")
    assert node is not None and node.name == "SEO Optimization"
    assert find_by_id(org_forest, "nope") is None
    assert find_by_id([], "1") is None


def test_find_parent(org_forest):
    assert find_parent(org_forest, "1-1-1-1").id == "1-1-1"
    assert find_parent(org_forest, "2-1").id == "2"
    # Roots and unknown ids both have no parent
    assert find_parent(org_forest, "1") is None
    assert find_parent(org_forest, "nope") is None


def test_is_descendant_excludes_self(org_forest):
    top = find_by_id(org_forest, "1")
    deep = find_by_id(org_forest, "1-1-1-2")
    other_root = find_by_id(org_forest, "2")
    assert is_descendant(top, deep)
    assert not is_descendant(deep, top)
    assert not is_descendant(top, top)
    assert not is_descendant(top, other_root)


def test_siblings_of(org_forest):
    assert [n.id for n in siblings_of(org_forest, "1-1-2")] == ["1-1-1", "1-1-2"]
    assert [n.id for n in siblings_of(org_forest, "2")] == ["1", "2"]
    assert siblings_of(org_forest, "nope") is None


def test_path_to(org_forest):
    assert [n.id for n in path_to(org_forest, "1-1-1-2")] == ["1", "1-1", "1-1-1", "1-1-1-2"]
    assert path_to(org_forest, "nope") == []


def test_recalculate_levels_repairs_levels_and_parents():
    broken = [
        TreeNode(
            id="r", name="R", level=4, parent_id="ghost",
            children=(
                TreeNode(id="c", name="C", level=0, children=(
                    TreeNode(id="g", name="G", level=9, parent_id="c"),
                )),
            ),
        )
    ]
    fixed = recalculate_levels(broken)
    assert [(n.id, n.level, n.parent_id) for n in iter_nodes(fixed)] == [
        ("r", 0, None), ("c", 1, "r"), ("g", 2, "c"),
    ]


def test_recalculate_levels_is_idempotent(org_forest):
    skewed = [replace(org_forest[0], level=3)] + list(org_forest[1:])
    once = recalculate_levels(skewed)
    twice = recalculate_levels(once)
    assert twice == once
    assert all(a is b for a, b in zip(once, twice))


def test_recalculate_levels_shares_consistent_subtrees(org_forest):
    result = recalculate_levels(org_forest)
    assert result == org_forest
    assert all(a is b for a, b in zip(result, org_forest))
