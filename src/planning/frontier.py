"""
Search Frontier

Min-priority queue over nodes with insert-or-improve (decrease-key)
semantics, keyed by Priority(f, g):
- f: estimated total cost (g + heuristic)
- g: best known cost from the start

Ordering is lexicographic on (f, g): lowest f first, and on equal f the
entry with the smaller g wins. Entries with identical (f, g) come out in
the order they were first inserted, so results are reproducible.

Implemented as a binary heap (heapq) with lazy invalidation: improving a
node pushes a new heap record and marks the old one dead. Dead records are
skipped on pop and never surface to the caller.
"""

import heapq
import itertools
from typing import Any, Dict, Hashable, List, NamedTuple, Optional, Tuple


class Priority(NamedTuple):
    """Frontier key. Compares as a plain (f, g) tuple."""
    f: float
    g: float


class InsertResult(NamedTuple):
    """
    Outcome of Frontier.insert_or_improve().

    updated: the node's priority was newly set (inserted or improved)
    discarded: the priority that lost out (the replaced one when improved,
               the rejected new one when not improved, None on first insert)
    """
    updated: bool
    discarded: Optional[Priority]


class _Entry:
    """Heap record. Mutable so it can be invalidated in place."""

    __slots__ = ('priority', 'order', 'node', 'alive')

    def __init__(self, priority: Priority, order: int, node):
        self.priority = priority
        self.order = order
        self.node = node
        self.alive = True

    def __lt__(self, other: '_Entry') -> bool:
        return (self.priority, self.order) < (other.priority, other.order)


class Frontier:
    """
    Open set of an A* search.

    At most one live entry per node: a better priority replaces the
    existing entry instead of duplicating it.

    Usage:
        frontier = Frontier()
        frontier.insert_or_improve('A', Priority(f=3.0, g=0.0))

        node, priority = frontier.pop_min()
    """

    def __init__(self):
        self._heap: List[_Entry] = []
        self._entries: Dict[Hashable, _Entry] = {}
        # First-insertion order per node, reused when the node is improved
        self._order: Dict[Hashable, int] = {}
        self._counter = itertools.count()

    def insert_or_improve(self, node, priority: Tuple[float, float]) -> InsertResult:
        """
        Insert a node, or lower its priority if the new one is strictly better.

        Args:
            node: Hashable node
            priority: (f, g) pair

        Returns:
            InsertResult(updated, discarded)
        """
        priority = Priority(*priority)
        current = self._entries.get(node)

        if current is not None and not priority < current.priority:
            return InsertResult(False, priority)

        order = self._order.get(node)
        if order is None:
            order = next(self._counter)
            self._order[node] = order

        discarded = None
        if current is not None:
            current.alive = False
            discarded = current.priority

        entry = _Entry(priority, order, node)
        self._entries[node] = entry
        heapq.heappush(self._heap, entry)
        return InsertResult(True, discarded)

    def pop_min(self) -> Optional[Tuple[Any, Priority]]:
        """
        Remove and return (node, priority) with the smallest (f, g).

        Returns:
            None if the frontier is empty
        """
        while self._heap:
            entry = heapq.heappop(self._heap)
            if not entry.alive:
                continue
            del self._entries[entry.node]
            return entry.node, entry.priority
        return None

    def peek(self) -> Optional[Tuple[Any, Priority]]:
        """Best (node, priority) without removing it."""
        while self._heap and not self._heap[0].alive:
            heapq.heappop(self._heap)
        if not self._heap:
            return None
        entry = self._heap[0]
        return entry.node, entry.priority

    def priority(self, node) -> Optional[Priority]:
        """Current priority of a node, or None if it is not in the frontier."""
        entry = self._entries.get(node)
        return entry.priority if entry is not None else None

    def __contains__(self, node) -> bool:
        return node in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
