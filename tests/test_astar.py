#!/usr/bin/env python3
"""
Unit tests for the A* search core
=================================
- Frontier ordering and insert-or-improve
- Search driver (optimality, completeness, determinism)
- Path reconstruction
- Search limits
"""

import heapq
import itertools
import random
import sys
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from planning import astar as astar_module
from planning.astar import (
    AStarSearch, SearchConfig, SearchStatus, SearchInvariantError,
    search, reconstruct_path, path_cost
)
from planning.frontier import Frontier, Priority
from planning.graph import Edge, ImplicitGraph, SimpleGraph


def abc_graph():
    """A->B 1, A->C 4, B->C 1, plus an isolated D."""
    graph = SimpleGraph(['A', 'B', 'C', 'D'])
    graph.add_edge('A', 'B', 1.0)
    graph.add_edge('A', 'C', 4.0)
    graph.add_edge('B', 'C', 1.0)
    return graph


def random_graph(seed, n_nodes=12, p_edge=0.25, max_cost=10):
    rng = random.Random(seed)
    graph = SimpleGraph(range(n_nodes))
    for a, b in itertools.permutations(range(n_nodes), 2):
        if rng.random() < p_edge:
            graph.add_edge(a, b, rng.randint(0, max_cost))
    return graph


def dijkstra_distances(graph, source, reverse=False):
    """Reference shortest distances, independent of the code under test."""
    adjacency = {node: [] for node in graph.nodes()}
    for node in graph.nodes():
        for edge in graph.edges(node):
            a, b = edge.from_node(), edge.to_node()
            if reverse:
                a, b = b, a
            adjacency[a].append((b, edge.cost()))

    dist = {source: 0.0}
    heap = [(0.0, source)]
    while heap:
        d, node = heapq.heappop(heap)
        if d > dist[node]:
            continue
        for nxt, cost in adjacency[node]:
            if d + cost < dist.get(nxt, float('inf')):
                dist[nxt] = d + cost
                heapq.heappush(heap, (d + cost, nxt))
    return dist


class IntegerLine(ImplicitGraph):
    """Infinite graph: n <-> n+1 with unit cost."""

    def edges(self, node):
        return [Edge(node, node - 1, 1.0), Edge(node, node + 1, 1.0)]


class RecordingFrontier(Frontier):
    """Frontier that keeps a history of every priority it accepted."""

    history = []

    def insert_or_improve(self, node, priority):
        result = super().insert_or_improve(node, priority)
        if result.updated:
            RecordingFrontier.history.append((node, Priority(*priority)))
        return result


class TestFrontier(unittest.TestCase):
    """Tests for the frontier."""

    def test_empty(self):
        frontier = Frontier()
        self.assertIsNone(frontier.pop_min())
        self.assertIsNone(frontier.peek())
        self.assertEqual(len(frontier), 0)
        self.assertFalse(frontier)

    def test_insert_new(self):
        frontier = Frontier()
        result = frontier.insert_or_improve('A', (3.0, 1.0))
        self.assertTrue(result.updated)
        self.assertIsNone(result.discarded)
        self.assertIn('A', frontier)
        self.assertEqual(frontier.priority('A'), Priority(3.0, 1.0))

    def test_improve_replaces(self):
        frontier = Frontier()
        frontier.insert_or_improve('A', (5.0, 3.0))
        result = frontier.insert_or_improve('A', (4.0, 2.0))
        self.assertTrue(result.updated)
        self.assertEqual(result.discarded, Priority(5.0, 3.0))
        self.assertEqual(len(frontier), 1)
        self.assertEqual(frontier.pop_min(), ('A', Priority(4.0, 2.0)))
        self.assertIsNone(frontier.pop_min())

    def test_worse_or_equal_is_ignored(self):
        frontier = Frontier()
        frontier.insert_or_improve('A', (4.0, 2.0))
        worse = frontier.insert_or_improve('A', (6.0, 4.0))
        same = frontier.insert_or_improve('A', (4.0, 2.0))
        self.assertFalse(worse.updated)
        self.assertEqual(worse.discarded, Priority(6.0, 4.0))
        self.assertFalse(same.updated)
        self.assertEqual(frontier.priority('A'), Priority(4.0, 2.0))

    def test_pop_order_by_f(self):
        frontier = Frontier()
        frontier.insert_or_improve('far', (9.0, 1.0))
        frontier.insert_or_improve('near', (2.0, 1.0))
        frontier.insert_or_improve('mid', (5.0, 1.0))
        order = [frontier.pop_min()[0] for _ in range(3)]
        self.assertEqual(order, ['near', 'mid', 'far'])

    def test_tie_on_f_prefers_smaller_g(self):
        frontier = Frontier()
        frontier.insert_or_improve('deep', (5.0, 4.0))
        frontier.insert_or_improve('shallow', (5.0, 1.0))
        self.assertEqual(frontier.pop_min()[0], 'shallow')

    def test_full_tie_is_first_inserted(self):
        frontier = Frontier()
        for node in ['x', 'y', 'z']:
            frontier.insert_or_improve(node, (1.0, 1.0))
        self.assertEqual([frontier.pop_min()[0] for _ in range(3)], ['x', 'y', 'z'])

    def test_stale_entries_never_returned(self):
        frontier = Frontier()
        frontier.insert_or_improve('A', (10.0, 10.0))
        frontier.insert_or_improve('B', (7.0, 7.0))
        frontier.insert_or_improve('A', (8.0, 8.0))
        frontier.insert_or_improve('A', (1.0, 1.0))
        popped = []
        while frontier:
            popped.append(frontier.pop_min())
        self.assertEqual(popped, [('A', Priority(1.0, 1.0)), ('B', Priority(7.0, 7.0))])

    def test_reinsert_after_pop(self):
        frontier = Frontier()
        frontier.insert_or_improve('A', (1.0, 1.0))
        frontier.pop_min()
        result = frontier.insert_or_improve('A', (3.0, 3.0))
        self.assertTrue(result.updated)
        self.assertIsNone(result.discarded)


class TestSearchScenarios(unittest.TestCase):
    """Concrete search scenarios."""

    def test_prefers_cheaper_two_hop_path(self):
        graph = abc_graph()
        path = search(graph, 'A', 'C', lambda n: 0.0)
        self.assertEqual(path, ['A', 'B', 'C'])
        self.assertEqual(path_cost(graph, path), 2.0)

    def test_isolated_goal_has_no_path(self):
        self.assertIsNone(search(abc_graph(), 'A', 'D', lambda n: 0.0))

    def test_unreachable_against_edge_direction(self):
        self.assertIsNone(search(abc_graph(), 'C', 'A'))

    def test_start_is_goal(self):
        graph = abc_graph()
        result = AStarSearch(graph).run('B', 'B')
        self.assertEqual(result.status, SearchStatus.FOUND)
        self.assertEqual(result.path, ['B'])
        self.assertEqual(result.cost, 0.0)

    def test_start_is_goal_isolated(self):
        self.assertEqual(search(abc_graph(), 'D', 'D'), ['D'])

    def test_result_reports_cost(self):
        result = AStarSearch(abc_graph()).run('A', 'C')
        self.assertTrue(result.found)
        self.assertEqual(result.cost, 2.0)
        self.assertGreaterEqual(result.expanded, 2)

    def test_self_loop_and_cycle(self):
        graph = SimpleGraph(['S', 'M', 'G'])
        graph.add_edge('S', 'S', 0.0)
        graph.add_edge('S', 'M', 1.0)
        graph.add_edge('M', 'S', 0.0)
        graph.add_edge('M', 'M', 0.0)
        graph.add_edge('M', 'G', 1.0)
        self.assertEqual(search(graph, 'S', 'G'), ['S', 'M', 'G'])

    def test_zero_cost_edges(self):
        graph = SimpleGraph(['A', 'B', 'C'])
        graph.add_edge('A', 'B', 0.0)
        graph.add_edge('B', 'C', 0.0)
        graph.add_edge('A', 'C', 0.5)
        self.assertEqual(search(graph, 'A', 'C'), ['A', 'B', 'C'])

    def test_relaxation_updates_predecessor(self):
        # C is first reached via A (cost 5), then improved via B (cost 2)
        graph = SimpleGraph(['A', 'B', 'C', 'G'])
        graph.add_edge('A', 'C', 5.0)
        graph.add_edge('A', 'B', 1.0)
        graph.add_edge('B', 'C', 1.0)
        graph.add_edge('C', 'G', 1.0)
        result = AStarSearch(graph).run('A', 'G')
        self.assertEqual(result.path, ['A', 'B', 'C', 'G'])
        self.assertEqual(result.cost, 3.0)

    def test_implicit_infinite_graph(self):
        path = search(IntegerLine(), 0, 5, lambda n: abs(5 - n))
        self.assertEqual(path, [0, 1, 2, 3, 4, 5])

    def test_tuple_nodes(self):
        graph = SimpleGraph([(0, 0), (0, 1), (1, 1)])
        graph.add_edge((0, 0), (0, 1))
        graph.add_edge((0, 1), (1, 1))
        self.assertEqual(search(graph, (0, 0), (1, 1)), [(0, 0), (0, 1), (1, 1)])


class TestSearchProperties(unittest.TestCase):
    """Optimality, completeness and determinism on random graphs."""

    SEEDS = range(40)

    def test_optimal_with_zero_heuristic(self):
        for seed in self.SEEDS:
            graph = random_graph(seed)
            dist = dijkstra_distances(graph, 0)
            goal = graph.nodes()[-1]
            result = AStarSearch(graph).run(0, goal)
            with self.subTest(seed=seed):
                if goal in dist:
                    self.assertTrue(result.found)
                    self.assertEqual(result.path[0], 0)
                    self.assertEqual(result.path[-1], goal)
                    self.assertAlmostEqual(result.cost, dist[goal])
                    self.assertAlmostEqual(path_cost(graph, result.path), dist[goal])
                else:
                    self.assertEqual(result.status, SearchStatus.NO_PATH)
                    self.assertIsNone(result.path)

    def test_optimal_with_consistent_heuristic(self):
        for seed in self.SEEDS:
            graph = random_graph(seed, n_nodes=15)
            goal = graph.nodes()[-1]
            # Scaled true distance-to-goal is admissible and consistent
            to_goal = dijkstra_distances(graph, goal, reverse=True)
            heuristic = lambda n: 0.5 * to_goal.get(n, 0.0)
            expected = dijkstra_distances(graph, 0).get(goal)
            path = search(graph, 0, goal, heuristic)
            with self.subTest(seed=seed):
                if expected is None:
                    self.assertIsNone(path)
                else:
                    self.assertAlmostEqual(path_cost(graph, path), expected)

    def test_exact_heuristic_expands_only_the_path(self):
        graph = SimpleGraph(range(6))
        for a, b in zip(range(5), range(1, 6)):
            graph.add_edge(a, b, 1.0)
        graph.add_edge(0, 5, 10.0)
        to_goal = dijkstra_distances(graph, 5, reverse=True)
        result = AStarSearch(graph, lambda n: to_goal[n]).run(0, 5)
        self.assertEqual(result.path, [0, 1, 2, 3, 4, 5])
        self.assertEqual(result.expanded, 5)

    def test_deterministic(self):
        # Grid of equal-cost routes: many optimal paths tie
        nodes = [(x, y) for x in range(4) for y in range(4)]
        graph = SimpleGraph(nodes)
        for x, y in nodes:
            for nx, ny in [(x + 1, y), (x, y + 1)]:
                if (nx, ny) in graph:
                    graph.add_edge((x, y), (nx, ny), 1.0)
        paths = [search(graph, (0, 0), (3, 3)) for _ in range(5)]
        self.assertTrue(all(p == paths[0] for p in paths))
        self.assertEqual(len(paths[0]), 7)

    def test_g_never_increases_in_frontier(self):
        RecordingFrontier.history = []
        with mock.patch.object(astar_module, 'Frontier', RecordingFrontier):
            for seed in range(10):
                search(random_graph(seed), 0, 11)
        self.assertTrue(RecordingFrontier.history)
        # Within one search a node's accepted g only ever decreases;
        # searches are separated by the start node's entry with g == 0
        best = {}
        for node, priority in RecordingFrontier.history:
            if priority.g == 0.0 and node == 0:
                best = {}
            if node in best:
                self.assertLess(priority.g, best[node])
            best[node] = priority.g


class TestReconstructPath(unittest.TestCase):
    """Tests for path reconstruction."""

    def test_chain(self):
        predecessors = {'C': 'B', 'B': 'A'}
        self.assertEqual(reconstruct_path(predecessors, 'C'), ['A', 'B', 'C'])
        self.assertEqual(reconstruct_path(predecessors, 'C', start='A'), ['A', 'B', 'C'])

    def test_goal_without_predecessor(self):
        self.assertEqual(reconstruct_path({}, 'A', start='A'), ['A'])

    def test_missing_goal_is_invariant_error(self):
        with self.assertRaises(SearchInvariantError):
            reconstruct_path({'B': 'A'}, 'C', start='A')

    def test_loop_is_invariant_error(self):
        with self.assertRaises(SearchInvariantError):
            reconstruct_path({'A': 'B', 'B': 'A'}, 'A')


class TestSearchLimits(unittest.TestCase):
    """Tests for expansion and time limits."""

    def test_expansion_limit_aborts(self):
        config = SearchConfig(max_expansions=3)
        result = AStarSearch(IntegerLine(), config=config).run(0, 100)
        self.assertEqual(result.status, SearchStatus.ABORTED)
        self.assertIsNone(result.path)
        self.assertEqual(result.expanded, 3)

    def test_limit_large_enough_finds_path(self):
        config = SearchConfig(max_expansions=100)
        result = AStarSearch(abc_graph(), config=config).run('A', 'C')
        self.assertEqual(result.status, SearchStatus.FOUND)

    def test_timeout_aborts(self):
        result = AStarSearch(IntegerLine(), config=SearchConfig(timeout=0.0)).run(0, 10)
        self.assertEqual(result.status, SearchStatus.ABORTED)

    def test_aborted_is_not_no_path(self):
        no_path = AStarSearch(abc_graph(), config=SearchConfig(max_expansions=100)).run('A', 'D')
        self.assertEqual(no_path.status, SearchStatus.NO_PATH)

    def test_heuristic_weight(self):
        weighted = AStarSearch(IntegerLine(), lambda n: abs(8 - n),
                               SearchConfig(heuristic_weight=2.0))
        result = weighted.run(0, 8)
        self.assertEqual(result.path, list(range(9)))
        self.assertEqual(result.cost, 8.0)


class TestPathCost(unittest.TestCase):

    def test_empty_and_single(self):
        graph = abc_graph()
        self.assertEqual(path_cost(graph, []), 0.0)
        self.assertEqual(path_cost(graph, ['A']), 0.0)

    def test_disconnected_raises(self):
        with self.assertRaises(ValueError):
            path_cost(abc_graph(), ['A', 'D'])


if __name__ == '__main__':
    unittest.main(verbosity=2)
