"""Property-based tests for RangeTree.

Uses Hypothesis to build trees from random ranges and compare them with
straightforward models: a Python set for membership and a point-sampling
brute force for coverage.
"""

from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from rangetree import Range, RangeTree


@st.composite
def ranges(draw: st.DrawFn, max_value: int = 60) -> Range:
    """Generate a valid integer range inside [0, max_value]."""
    start = draw(st.integers(min_value=0, max_value=max_value))
    length = draw(st.integers(min_value=0, max_value=15))
    return Range(start, min(start + length, max_value))


def brute_force_covered(target: Range, stored) -> bool:
    """
    True if every real point of target lies in some stored range.

    With integer endpoints it is enough to check every integer and every
    half-integer in target, done here on doubled coordinates.
    """
    for point in range(2 * target.start, 2 * target.end + 1):
        if not any(2 * r.start <= point <= 2 * r.end for r in stored):
            return False
    return True


def subtree_max(node):
    """Re-derive max over a subtree without trusting cached values."""
    if node is None:
        return None
    best = node.range.end
    for child in (node.left, node.right):
        child_max = subtree_max(child)
        if child_max is not None and child_max > best:
            best = child_max
    return best


def assert_max_invariant(tree: RangeTree):
    stack = [tree.root] if tree.root else []
    while stack:
        node = stack.pop()
        assert node.max == subtree_max(node)
        stack.extend(child for child in (node.left, node.right) if child)


def build(items) -> RangeTree:
    tree = RangeTree()
    for item in items:
        tree.insert(item)
    return tree


class TestInsertProperties:
    @given(st.lists(ranges(), max_size=40))
    @settings(max_examples=200)
    def test_inserted_range_is_covered(self, items):
        tree = RangeTree()
        for item in items:
            tree.insert(item)
            assert tree.query(item)

    @given(st.lists(ranges(), max_size=40), ranges())
    @settings(max_examples=200)
    def test_duplicate_insert_is_noop(self, items, extra):
        tree = build(items)
        first = tree.insert(extra)
        size = len(tree)

        assert first == (extra not in set(items))
        assert not tree.insert(extra)
        assert len(tree) == size

    @given(st.lists(ranges(), max_size=40))
    @settings(max_examples=200)
    def test_max_matches_full_rederivation(self, items):
        assert_max_invariant(build(items))

    @given(st.lists(ranges(), max_size=40))
    @settings(max_examples=200)
    def test_in_order_is_sorted_and_unique(self, items):
        tree = build(items)

        assert list(tree) == sorted(set(items))
        assert len(tree) == len(set(items))
        tree.verify_integrity()


class TestQueryProperties:
    @given(ranges())
    def test_empty_tree_covers_nothing(self, target):
        assert not RangeTree().query(target)

    @given(st.lists(ranges(), max_size=30), st.lists(ranges(), min_size=1, max_size=10))
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_coverage_matches_brute_force(self, items, targets):
        tree = build(items)
        for target in targets:
            assert tree.query(target) == brute_force_covered(target, items), target

    @given(st.lists(ranges(), max_size=30), ranges())
    @settings(max_examples=200)
    def test_overlapping_matches_linear_scan(self, items, target):
        tree = build(items)
        expected = sorted(r for r in set(items) if r.overlaps(target))
        assert tree.overlapping(target) == expected


class TestDeleteProperties:
    @given(ranges())
    def test_delete_on_empty_tree(self, target):
        tree = RangeTree()
        assert not tree.delete(target)
        assert tree.root is None

    @given(st.lists(ranges(), max_size=30), ranges())
    @settings(max_examples=200)
    def test_delete_of_absent_range_changes_nothing(self, items, target):
        tree = build(r for r in items if r != target)
        before = str(tree)

        assert not tree.delete(target)
        assert str(tree) == before

    @given(st.lists(ranges(), max_size=40), st.data())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_delete_keeps_invariants(self, items, data):
        tree = build(items)
        model = set(items)

        victims = data.draw(st.lists(st.sampled_from(items), max_size=len(items))) if items else []
        for victim in victims:
            assert tree.delete(victim) == (victim in model)
            model.discard(victim)

            assert list(tree) == sorted(model)
            assert_max_invariant(tree)

        target = data.draw(ranges())
        assert tree.query(target) == brute_force_covered(target, model)
