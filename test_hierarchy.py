#!/usr/bin/env python3
"""
Hierarchy tests
Root lists, children lists, id resolution and cycle handling.
"""

import sys

from core.hierarchy import HierarchyBuilder, HierarchyCycleError, iter_preorder, node_depths
from core.model_data import ModelData, Node
from readers import LineSource, SMDReader


def build(text):
    model = SMDReader("inline.smd").parse(LineSource.from_text(text))
    HierarchyBuilder().build(model)
    return model


def test_root_with_child():
    model = build('nodes\n0 "root" -1\n1 "child" 0\nend\n')
    assert model.skeleton.root_nodes == [0]
    assert model.nodes[0].name == "root"
    assert model.nodes[0].children == [1]
    assert model.nodes[1].children == []
    assert model.skeleton.cyclic_nodes == []

    child = model.get_node_by_name("child")
    assert child is model.nodes[1]
    assert child.parent == 0
    assert model.get_node_by_name("missing") is None


def test_every_child_listed_once():
    text = ('nodes\n'
            '0 "pelvis" -1\n1 "spine" 0\n2 "thigh_l" 0\n3 "thigh_r" 0\n'
            '4 "head" 1\n5 "prop" -1\n6 "calf_l" 2\n'
            'end\n')
    model = build(text)
    assert model.skeleton.root_nodes == [0, 5]

    listed = [child for node in model.nodes for child in node.children]
    assert sorted(listed) == [1, 2, 3, 4, 6]
    assert model.nodes[0].children == [1, 2, 3]
    assert model.nodes[2].children == [6]


def test_parents_resolve_through_declared_ids():
    model = build('nodes\n10 "root" -1\n20 "child" 10\n30 "grandchild" 20\nend\n')
    assert model.skeleton.root_nodes == [0]
    assert model.nodes[0].children == [1]
    assert model.nodes[1].children == [2]


def test_unknown_parent_becomes_root():
    model = build('nodes\n0 "root" -1\n1 "stray" 7\nend\n')
    assert model.skeleton.root_nodes == [0, 1]
    assert model.nodes[0].children == []


def test_parent_cycle_is_reported():
    model = build('nodes\n0 "root" -1\n1 "a" 2\n2 "b" 1\n3 "self" 3\nend\n')
    assert model.skeleton.root_nodes == [0]
    assert model.skeleton.cyclic_nodes == [1, 2, 3]


def test_preorder_walk():
    model = build('nodes\n0 "a" -1\n1 "b" 0\n2 "c" 1\n3 "d" 0\nend\n')
    assert list(iter_preorder(model)) == [(0, None), (1, 0), (2, 1), (3, 0)]
    assert node_depths(model) == [(0, 0), (1, 1), (2, 2), (3, 1)]


def test_deep_chain_does_not_recurse():
    depth = 5000
    lines = ['nodes', '0 "bone0" -1']
    lines += [f'{i} "bone{i}" {i - 1}' for i in range(1, depth)]
    lines.append('end')
    model = build('\n'.join(lines))
    assert len(list(iter_preorder(model))) == depth


def test_revisit_raises():
    model = ModelData()
    model.add_node(Node(id=0, name="a", children=[1]))
    model.add_node(Node(id=1, name="b", parent=0, children=[0]))
    model.skeleton.root_nodes = [0]
    try:
        list(iter_preorder(model))
    except HierarchyCycleError as e:
        assert e.node_index == 0
    else:
        raise AssertionError("expected HierarchyCycleError")


def main():
    """Run all tests"""
    tests = [(name, func) for name, func in sorted(globals().items())
             if name.startswith('test_') and callable(func)]

    print("=" * 60)
    print("Hierarchy Tests")
    print("=" * 60)

    failed = 0
    for name, func in tests:
        try:
            func()
            print(f"✓ PASS: {name}")
        except AssertionError as e:
            failed += 1
            print(f"✗ FAIL: {name} {e}")

    print()
    print(f"{len(tests) - failed}/{len(tests)} passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
