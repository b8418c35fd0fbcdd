"""Tests for network regeneration and route queries."""

import pytest
from py_wan.config import Settings
from py_wan.core import (
    WANNetwork, InvalidArgumentError, InvalidConfigurationError, NetworkNotGeneratedError
)


@pytest.fixture
def config():
    return Settings(node_count=20, earth_radius=0.5, radius_multiplier=1.02,
                    angle_threshold=60.0, node_names=["Japan", "Brazil"])


@pytest.fixture
def network(config):
    network = WANNetwork(config)
    network.regenerate()
    return network


class TestRegeneration:
    """Whole-network replacement."""

    def test_defaults_from_settings(self, network):
        assert len(network.nodes) == 20
        assert network.generation_id == 1
        assert network.options.radius == pytest.approx(0.51)
        assert network.options.angle_threshold == 60.0
        assert [n.name for n in network.nodes[:3]] == ["Japan", "Brazil", "Node2"]

    def test_overrides(self, network):
        graph = network.regenerate(count=8, radius=2.0, names=[], angle_threshold=90.0)

        assert len(graph) == 8
        assert network.graph is graph
        assert network.options.node_count == 8
        assert all(n.generation_id == 2 for n in graph)

    def test_regeneration_replaces_graph(self, network):
        old_graph = network.graph
        old_node = network.get_node("Japan")
        old_edges = len(old_graph.edges)

        network.regenerate()
        new_node = network.get_node("Japan")

        assert network.graph is not old_graph
        assert network.generation_id == 2
        assert old_node != new_node
        assert old_node.position == new_node.position
        # Old batch is left as it was
        assert len(old_graph.edges) == old_edges

    def test_invalid_configuration_keeps_current_graph(self, network):
        current = network.graph

        with pytest.raises(InvalidConfigurationError):
            network.regenerate(count=-5)
        with pytest.raises(InvalidConfigurationError):
            network.regenerate(radius=0.0)
        with pytest.raises(InvalidConfigurationError):
            network.regenerate(angle_threshold=-1.0)

        assert network.graph is current
        assert network.generation_id == 1

    def test_empty_network(self, config):
        network = WANNetwork(config)
        graph = network.regenerate(count=0)

        assert len(graph) == 0
        assert network.is_generated

    def test_clear(self, network):
        network.clear()

        assert not network.is_generated
        assert network.nodes == ()
        with pytest.raises(NetworkNotGeneratedError):
            network.get_node("Japan")


class TestRoutes:
    """Route queries by node name."""

    def test_route_between_neighbors(self, network):
        start = network.get_node("Japan")
        neighbor = start.neighbors[0]

        route = network.find_route("Japan", neighbor.name)

        assert route.found
        assert route.hops == 1
        assert route.names == ["Japan", neighbor.name]
        assert route.distance == pytest.approx(network.graph.get_edge(start, neighbor).weight)

    def test_route_is_connected_chain(self, network):
        route = network.find_route("Japan", "Node19")

        if route.found:
            assert route.names[0] == "Japan"
            assert route.names[-1] == "Node19"
            for a, b in zip(route.nodes, route.nodes[1:]):
                assert network.graph.has_edge(a, b)
        else:
            assert route.hops == 0

    def test_same_node_is_not_a_route(self, network):
        route = network.find_route("Japan", "Japan")

        assert not route.found
        assert route.names == ["Japan"]
        assert route.distance == 0.0

    def test_unknown_node(self, network):
        with pytest.raises(KeyError):
            network.find_route("Japan", "Atlantis")

    def test_blank_name(self, network):
        with pytest.raises(InvalidArgumentError):
            network.find_route("", "Japan")

    def test_before_generation(self, config):
        with pytest.raises(NetworkNotGeneratedError):
            WANNetwork(config).find_route("Japan", "Brazil")
