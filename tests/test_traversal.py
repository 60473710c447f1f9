import pytest

from scalargrad import ops
from scalargrad.errors import CyclicGraph
from scalargrad.node import leaf
from scalargrad.traversal import reverse_topological_order, topological_order


def assert_children_first(order):
    position = {n.id: i for i, n in enumerate(order)}
    for node in order:
        for child in node.children:
            assert position[child.id] < position[node.id]


def test_single_leaf():
    a = leaf(1.0)
    assert topological_order(a) == [a]


def test_order_respects_dependencies():
    t1, t2 = leaf(1.0), leaf(2.0)
    t3 = t1 + t2
    t4 = t3 + 5.0
    t5 = t2 + 10.0
    t6 = t4 + t5

    order = topological_order(t6)
    assert order[-1] is t6
    assert_children_first(order)
    ids = [n.id for n in order]
    assert len(ids) == len(set(ids))
    assert {t1.id, t2.id, t3.id, t4.id, t5.id, t6.id} <= set(ids)

    reverse = reverse_topological_order(t6)
    assert reverse[0] is t6
    assert reverse == order[::-1]


def test_diamond_is_not_a_cycle():
    # a feeds b and c, both feed d
    a = leaf(2.0)
    b = a * 3.0
    c = ops.tanh(a)
    d = b + c

    order = topological_order(d)
    assert [n for n in order if n is a] == [a]
    assert_children_first(order)


def test_same_operand_twice_is_not_a_cycle():
    a = leaf(2.0)
    b = a + a
    assert topological_order(b) == [a, b]


def test_self_reference_is_rejected():
    a = leaf(1.0)
    b = a * 2.0
    b._children.append(b)
    with pytest.raises(CyclicGraph) as exc_info:
        topological_order(b)
    assert exc_info.value.node_id == b.id


def test_ancestor_reference_is_rejected():
    a = leaf(1.0)
    b = a + 1.0
    c = b * 2.0
    # make the leaf depend on its own descendant
    a._children.append(c)
    with pytest.raises(CyclicGraph):
        topological_order(c)


def test_cycle_below_a_shared_subexpression_is_rejected():
    a = leaf(1.0)
    b = ops.tanh(a)
    c = b + b
    d = c * a
    b._children.append(c)
    with pytest.raises(CyclicGraph):
        topological_order(d)


def test_deep_chain_does_not_hit_recursion_limit():
    depth = 5000
    x = leaf(0.0)
    node = x
    for _ in range(depth):
        node = node + 1.0
    order = topological_order(node)
    # the chain nodes plus one constant leaf per step
    assert len(order) == 2 * depth + 1
    assert order[-1] is node


def test_deep_fan_out_fan_in_with_cycle_is_rejected():
    x = leaf(0.5)
    node = x
    for _ in range(1500):
        node = (node + node) * 0.5
    x._children.append(node)
    with pytest.raises(CyclicGraph):
        topological_order(node)
