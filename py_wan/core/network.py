"""
WAN network orchestration.

WANNetwork owns the current generation of the globe network. Regeneration
builds a complete new NodeGraph (placement, then linking) and only then
publishes it, so a reader never sees a half-built graph. Route queries are
resolved by node name against whatever graph is current.
"""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import structlog

from ..config import Settings, settings as default_settings
from .connector import connect_neighbors
from .errors import InvalidArgumentError, NetworkNotGeneratedError
from .node_graph import NodeGraph, WANNode
from .pathfinder import find_shortest_path, path_length
from .sphere_points import distribute_nodes

logger = structlog.get_logger()


@dataclass
class NetworkOptions:
    """Parameters a generation was built with."""
    node_count: int
    radius: float
    angle_threshold: float
    names: List[str] = field(default_factory=list)


@dataclass
class Route:
    """A path query result."""
    source: str
    target: str
    nodes: List[WANNode]
    distance: float = 0.0

    @property
    def found(self) -> bool:
        return len(self.nodes) >= 2

    @property
    def hops(self) -> int:
        return max(len(self.nodes) - 1, 0)

    @property
    def names(self) -> List[str]:
        return [n.name for n in self.nodes]


class WANNetwork:
    """Holds the current node graph and answers route queries against it."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._graph: Optional[NodeGraph] = None
        self._options: Optional[NetworkOptions] = None
        self._generation = 0
        # Serialises regeneration when requests run on worker threads
        self._lock = threading.Lock()

    @property
    def graph(self) -> Optional[NodeGraph]:
        return self._graph

    @property
    def options(self) -> Optional[NetworkOptions]:
        return self._options

    @property
    def generation_id(self) -> int:
        """Tag of the most recent generation, 0 before the first one."""
        return self._generation

    @property
    def is_generated(self) -> bool:
        return self._graph is not None

    @property
    def nodes(self) -> Sequence[WANNode]:
        return self._graph.nodes if self._graph is not None else ()

    def regenerate(self, count: Optional[int] = None, radius: Optional[float] = None,
                   names: Optional[Sequence[str]] = None,
                   angle_threshold: Optional[float] = None) -> NodeGraph:
        """
        Replace the whole network with a freshly built one.

        Arguments left as None fall back to the configured defaults. If
        validation fails the current graph stays in place.
        """
        count = self.config.node_count if count is None else count
        radius = self.config.node_radius if radius is None else radius
        names = list(self.config.node_names if names is None else names)
        angle_threshold = self.config.angle_threshold if angle_threshold is None else angle_threshold

        with self._lock:
            generation_id = self._generation + 1
            logger.info("Generating network", generation_id=generation_id,
                        count=count, radius=radius, angle_threshold=angle_threshold)

            nodes = distribute_nodes(count, radius, names, generation_id=generation_id)
            graph = connect_neighbors(NodeGraph(nodes), angle_threshold)

            # Publish only once fully built
            self._graph = graph
            self._options = NetworkOptions(count, float(radius), float(angle_threshold), names)
            self._generation = generation_id

        logger.info("Network generated", generation_id=generation_id,
                    nodes=len(graph), edges=len(graph.edges))
        return graph

    def clear(self) -> None:
        """Drop the current network."""
        with self._lock:
            if self._graph is not None:
                logger.info("Network cleared", generation_id=self._generation)
            self._graph = None
            self._options = None

    def _require_graph(self) -> NodeGraph:
        if self._graph is None:
            raise NetworkNotGeneratedError("No network has been generated yet")
        return self._graph

    def get_node(self, name: str) -> WANNode:
        """Current node by name; KeyError if unknown."""
        graph = self._require_graph()
        node = graph.get(name)
        if node is None:
            raise KeyError(name)
        return node

    def find_route(self, source: str, target: str) -> Route:
        """
        Shortest route between two named nodes of the current network.

        The same name twice or an unreachable target returns a Route with
        ``found == False`` instead of raising.
        """
        if not source or not target:
            raise InvalidArgumentError("Both source and target node names are required")

        start = self.get_node(source)
        end = self.get_node(target)

        path = find_shortest_path(start, end)
        route = Route(source, target, path, path_length(path) if len(path) >= 2 else 0.0)

        if not route.found:
            logger.warning("No valid path found between selected nodes",
                           source=source, target=target)
        else:
            logger.info("Route computed", source=source, target=target,
                        hops=route.hops, distance=route.distance)
        return route
