"""
Augmented binary search tree over closed ranges.

Nodes are ordered by (start, end) and each node caches the largest end
in its subtree, which lets searches skip whole subtrees that finish
before the query begins. The tree is not self-balancing.

All walks are iterative so that a degenerate tree (for example one built
from strictly increasing ranges) does not hit the recursion limit.
"""

from datetime import datetime
from typing import Callable, Iterator, Optional, Generic
import sys

from .config import TreeConfig
from .range import Range, T, validate_range


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] TREE: {msg}", file=sys.stderr)


class RangeNode(Generic[T]):
    """Tree node holding one range and the max end of its subtree."""
    __slots__ = ['range', 'left', 'right', 'max']

    def __init__(self, range_: Range[T]):
        self.range: Range[T] = range_
        self.left: Optional['RangeNode[T]'] = None
        self.right: Optional['RangeNode[T]'] = None
        self.max: T = range_.end


class RangeTree(Generic[T]):
    """
    Set of ranges answering "is this range covered by the union of stored ranges?".

    Duplicate ranges are stored once. insert, delete and query validate
    their argument before touching the tree, so an InvalidRangeError
    never leaves it half-modified.
    """

    def __init__(self, config: Optional[TreeConfig] = None):
        self.root: Optional[RangeNode[T]] = None
        self.config = config if config is not None else TreeConfig()
        self._size = 0

    # --- Internal Utilities ---

    def _debug(self, msg: str):
        if self.config.debug:
            _debug_print(msg)

    def _update(self, node: RangeNode[T]):
        m = node.range.end
        if node.left and node.left.max > m: m = node.left.max
        if node.right and node.right.max > m: m = node.right.max
        node.max = m

    def _replace_child(self, parent: Optional[RangeNode[T]], old: RangeNode[T],
                       new: Optional[RangeNode[T]]):
        if parent is None: self.root = new
        elif parent.left is old: parent.left = new
        else: parent.right = new

    def _after_mutation(self):
        if self.config.verify_integrity:
            self.verify_integrity()

    def _nodes(self) -> Iterator[RangeNode[T]]:
        """All nodes in order."""
        stack: list[RangeNode[T]] = []
        node = self.root
        while stack or node:
            while node:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def _walk(self, min_end: T, max_start: T) -> Iterator[RangeNode[T]]:
        """
        In-order walk pruned for searches needing end >= min_end and start <= max_start.
        Yielded nodes still need their own range checked by the caller.

        Subtrees whose max end is below min_end are skipped, and the walk stops
        at the first node starting after max_start since every later node starts
        at or after it.
        """
        stack: list[RangeNode[T]] = []
        node = self.root
        while True:
            while node and not node.max < min_end:
                stack.append(node)
                node = node.left
            if not stack:
                return
            node = stack.pop()
            if node.range.start > max_start:
                return
            yield node
            node = node.right

    # --- Public API ---

    def insert(self, range_: Range[T]) -> bool:
        """Add range_ to the tree. Returns False if it is already present."""
        validate_range(range_)

        if not self.root:
            self.root = RangeNode(range_)
            self._size = 1
            self._debug(f"insert {range_}: new root")
            self._after_mutation()
            return True

        curr = self.root
        while True:
            # the new node ends up below curr, so curr's max must cover it
            if range_.end > curr.max: curr.max = range_.end

            if range_ == curr.range:
                self._debug(f"insert {range_}: duplicate")
                return False
            if range_ < curr.range:
                if not curr.left:
                    curr.left = RangeNode(range_)
                    break
                curr = curr.left
            else:
                if not curr.right:
                    curr.right = RangeNode(range_)
                    break
                curr = curr.right

        self._size += 1
        self._debug(f"insert {range_}: added (size={self._size})")
        self._after_mutation()
        return True

    def delete(self, range_: Range[T]) -> bool:
        """Remove range_ from the tree. Returns False if it was not present."""
        validate_range(range_)

        # ancestors of curr, root first
        path: list[RangeNode[T]] = []
        curr = self.root
        while curr and curr.range != range_:
            path.append(curr)
            curr = curr.left if range_ < curr.range else curr.right

        if not curr:
            self._debug(f"delete {range_}: not found")
            return False

        if curr.left and curr.right:
            # Two children: take over the in-order successor's range,
            # then unlink the successor, which has no left child.
            target = curr
            path.append(target)
            curr = target.right
            while curr.left:
                path.append(curr)
                curr = curr.left
            target.range = curr.range

        child = curr.left or curr.right
        self._replace_child(path[-1] if path else None, curr, child)

        # The removed range may have been the only source of an ancestor's max
        for node in reversed(path):
            self._update(node)

        self._size -= 1
        self._debug(f"delete {range_}: removed (size={self._size})")
        self._after_mutation()
        return True

    def query(self, target: Range[T]) -> bool:
        """True if target is contained in the union of the stored ranges."""
        validate_range(target)

        candidates = self._overlapping(target)
        covered = self._covers(target, candidates)
        self._debug(f"query {target}: {len(candidates)} overlapping, covered={covered}")
        return covered

    def overlapping(self, target: Range[T]) -> list[Range[T]]:
        """Stored ranges overlapping target, in ascending order."""
        validate_range(target)
        return self._overlapping(target)

    def _overlapping(self, target: Range[T]) -> list[Range[T]]:
        return [node.range for node in self._walk(target.start, target.end)
                if node.range.overlaps(target)]

    @staticmethod
    def _covers(target: Range[T], ranges: list[Range[T]]) -> bool:
        """
        Sweep ranges (sorted by start) merging overlapping neighbours.

        Once the merged range stops overlapping the next candidate it cannot
        overlap any later one either, so it is dropped and a new run starts.
        """
        merged: Optional[Range[T]] = None
        for candidate in ranges:
            if merged is not None and merged.overlaps(candidate):
                merged = merged.union(candidate)
            else:
                merged = candidate

            if merged.start > target.end:
                return False
            if merged.contains(target):
                return True
        return False

    def contains(self, range_: Range[T]) -> bool:
        """True if exactly range_ is stored."""
        validate_range(range_)
        curr = self.root
        while curr:
            if range_ == curr.range:
                return True
            curr = curr.left if range_ < curr.range else curr.right
        return False

    def height(self) -> int:
        """Nodes on the longest root-to-leaf path, 0 for an empty tree."""
        best = 0
        stack = [(self.root, 1)] if self.root else []
        while stack:
            node, depth = stack.pop()
            best = max(best, depth)
            if node.left: stack.append((node.left, depth + 1))
            if node.right: stack.append((node.right, depth + 1))
        return best

    def clear(self):
        self.root = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, range_: Range[T]) -> bool:
        return self.contains(range_)

    def __iter__(self) -> Iterator[Range[T]]:
        return (node.range for node in self._nodes())

    def __str__(self) -> str:
        return "".join(f"[{node.range}, {node.max}]" for node in self._nodes())

    # --- Search Methods ---

    def find_overlapping(self, target: Range[T], callback: Callable[[Range[T]], None]):
        """Finds ranges that have any overlap with target."""
        for range_ in self.overlapping(target):
            callback(range_)

    def find_containing(self, target: Range[T], callback: Callable[[Range[T]], None]):
        """Finds ranges that fully enclose target."""
        validate_range(target)
        for node in self._walk(min_end=target.end, max_start=target.start):
            if node.range.contains(target): callback(node.range)

    def find_contained(self, target: Range[T], callback: Callable[[Range[T]], None]):
        """Finds ranges that lie inside target."""
        validate_range(target)
        for node in self._walk(target.start, target.end):
            if target.contains(node.range): callback(node.range)

    def find_stabbing(self, point: T, callback: Callable[[Range[T]], None]):
        """Finds ranges that cover a single point."""
        validate_range(Range(point, point))
        for node in self._walk(point, point):
            if node.range.end >= point: callback(node.range)

    # --- Debug Tool ---

    def verify_integrity(self):
        """Raises RuntimeError if ordering, uniqueness or max_end are violated."""
        self._debug(f"verify_integrity: {self._size} ranges")
        previous: Optional[Range[T]] = None
        count = 0
        for node in self._nodes():
            if previous is not None and not previous < node.range:
                raise RuntimeError(f"Order Violation at {node.range} (after {previous})")
            previous = node.range
            count += 1

            # checked at every node, so each cached max is exact by induction
            expected_max = node.range.end
            if node.left and node.left.max > expected_max: expected_max = node.left.max
            if node.right and node.right.max > expected_max: expected_max = node.right.max
            if node.max != expected_max:
                raise RuntimeError(f"MaxEnd Violation at {node.range}: {node.max} != {expected_max}")

        if count != self._size:
            raise RuntimeError(f"Size Violation: counted {count}, recorded {self._size}")
