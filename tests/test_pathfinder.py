"""Tests for reachability discovery and Dijkstra shortest paths."""

import math

import pytest
from py_wan.core import (
    WANNode, NodeGraph, distribute_nodes, connect_neighbors,
    find_shortest_path, discover_reachable, path_length, InvalidArgumentError
)
from py_wan.core.pathfinder import dijkstra
from py_wan.core.vector_math import distance


def build_graph(positions, edges):
    """NodeGraph from {name: position} and (name, name) pairs, edges in the given order."""
    graph = NodeGraph(WANNode(name, position) for name, position in positions.items())
    for a, b in edges:
        graph.add_edge(a, b)
    return graph


def brute_force_shortest(start, end):
    """Minimum total length over all simple paths, inf when none exist."""
    best = math.inf

    def walk(node, visited, length):
        nonlocal best
        if length >= best:
            return
        if node == end:
            best = length
            return
        for neighbor in node.neighbors:
            if neighbor not in visited:
                walk(neighbor, visited | {neighbor},
                     length + distance(node.position, neighbor.position))

    walk(start, {start}, 0.0)
    return best


class TestDiscovery:
    """Breadth-first reachability."""

    def test_bfs_order(self):
        graph = build_graph(
            {"A": (0, 0, 0), "B": (1, 0, 0), "C": (2, 0, 0), "D": (0, 1, 0), "E": (9, 9, 9)},
            [("A", "B"), ("A", "D"), ("B", "C")],
        )

        assert [n.name for n in discover_reachable(graph["A"])] == ["A", "B", "D", "C"]

    def test_isolated_start(self):
        node = WANNode("Solo", (0, 0, 1))
        assert discover_reachable(node) == [node]

    def test_each_node_once_with_cycles(self):
        graph = build_graph(
            {"A": (0, 0, 0), "B": (1, 0, 0), "C": (1, 1, 0), "D": (0, 1, 0)},
            [("A", "B"), ("B", "C"), ("C", "D"), ("D", "A"), ("A", "C")],
        )
        reachable = discover_reachable(graph["A"])

        assert len(reachable) == 4
        assert len(set(reachable)) == 4

    def test_missing_start(self):
        with pytest.raises(InvalidArgumentError):
            discover_reachable(None)


class TestShortestPath:
    """Path results and sentinels."""

    def test_prefers_shorter_multi_hop_route(self):
        graph = build_graph(
            {"A": (0, 0, 0), "B": (1, 0, 0), "C": (2, 0, 0), "D": (1, 5, 0)},
            [("A", "D"), ("D", "C"), ("A", "B"), ("B", "C")],
        )
        path = find_shortest_path(graph["A"], graph["C"])

        assert [n.name for n in path] == ["A", "B", "C"]
        assert path_length(path) == pytest.approx(2.0)

    def test_direct_edge_when_shorter(self):
        graph = build_graph(
            {"A": (0, 0, 0), "B": (1, 0.1, 0), "C": (2, 0, 0)},
            [("A", "B"), ("B", "C"), ("A", "C")],
        )
        path = find_shortest_path(graph["A"], graph["C"])

        assert [n.name for n in path] == ["A", "C"]

    def test_same_start_and_end(self):
        """A path from a node to itself is the one-element sentinel."""
        graph = build_graph({"A": (0, 0, 0), "B": (1, 0, 0)}, [("A", "B")])
        assert find_shortest_path(graph["A"], graph["A"]) == [graph["A"]]

    def test_disjoint_clusters(self):
        """No edge between clusters means no path."""
        graph = build_graph(
            {"A1": (0, 0, 0), "A2": (1, 0, 0), "B1": (5, 5, 5), "B2": (6, 5, 5)},
            [("A1", "A2"), ("B1", "B2")],
        )
        path = find_shortest_path(graph["A1"], graph["B2"])

        assert len(path) < 2
        assert path == [graph["B2"]]

    def test_isolated_start(self):
        graph = build_graph({"A": (0, 0, 0), "B": (1, 0, 0)}, [])
        assert len(find_shortest_path(graph["A"], graph["B"])) < 2

    @pytest.mark.parametrize("start,end", [(None, "A"), ("A", None), (None, None)])
    def test_missing_nodes(self, start, end):
        graph = build_graph({"A": (0, 0, 0)}, [])
        start = graph[start] if start else None
        end = graph[end] if end else None

        with pytest.raises(InvalidArgumentError):
            find_shortest_path(start, end)

    def test_ties_follow_discovery_order(self):
        """Equal-length routes resolve to the branch discovered first."""
        positions = {"A": (0, 0, 0), "B": (1, 0, 0), "C": (0, 1, 0), "D": (1, 1, 0)}

        via_b = build_graph(positions, [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        via_c = build_graph(positions, [("A", "C"), ("A", "B"), ("C", "D"), ("B", "D")])

        assert [n.name for n in find_shortest_path(via_b["A"], via_b["D"])] == ["A", "B", "D"]
        assert [n.name for n in find_shortest_path(via_c["A"], via_c["D"])] == ["A", "C", "D"]

    def test_repeatable(self):
        graph = connect_neighbors(distribute_nodes(30, 1.0))
        start, end = graph.nodes[0], graph.nodes[-1]

        assert find_shortest_path(start, end) == find_shortest_path(start, end)

    def test_stale_reference_after_regeneration(self):
        """A node from an older batch is a different node."""
        old = connect_neighbors(distribute_nodes(10, 1.0, generation_id=1))
        new = connect_neighbors(distribute_nodes(10, 1.0, generation_id=2))

        path = find_shortest_path(new.nodes[0], old.nodes[3])
        assert len(path) < 2


class TestOptimality:
    """Dijkstra results match brute force on small meshes."""

    @pytest.mark.parametrize("count,threshold", [
        (5, 90.0),
        (6, 120.0),
        (8, 90.0),
        (8, 180.0),
    ])
    def test_matches_brute_force(self, count, threshold):
        graph = connect_neighbors(distribute_nodes(count, 1.0), threshold)

        for start in graph:
            distances, _ = dijkstra(start)
            for end in graph:
                if start == end:
                    continue
                path = find_shortest_path(start, end)
                best = brute_force_shortest(start, end)

                if math.isinf(best):
                    assert len(path) < 2
                    continue

                assert path[0] == start
                assert path[-1] == end
                for a, b in zip(path, path[1:]):
                    assert b in a.neighbors
                assert path_length(path) == pytest.approx(best)
                assert distances[end] == pytest.approx(best)

    def test_distances_cover_component(self):
        graph = build_graph(
            {"A": (0, 0, 0), "B": (3, 4, 0), "C": (3, 4, 12), "D": (100, 0, 0)},
            [("A", "B"), ("B", "C")],
        )
        distances, previous = dijkstra(graph["A"])

        assert set(distances) == {graph["A"], graph["B"], graph["C"]}
        assert distances[graph["C"]] == pytest.approx(17.0)
        assert previous[graph["C"]] == graph["B"]
        assert previous[graph["A"]] is None


def test_path_length_of_short_results():
    node = WANNode("A", (0, 0, 0))
    assert path_length([]) == 0.0
    assert path_length([node]) == 0.0
