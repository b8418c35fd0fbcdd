"""
Node and edge data model for the WAN graph.

A NodeGraph holds the nodes of one generation batch, their adjacency and
the name-pair edge lookup. Adjacency lives on the nodes themselves so the
path finder can walk it from any node reference.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np
import structlog

from .errors import InvalidArgumentError, InvalidConfigurationError
from .vector_math import distance

logger = structlog.get_logger()

Position = Tuple[float, float, float]


@dataclass(frozen=True, eq=False)
class WANNode:
    """A placed network endpoint.

    Identity is (name, position, generation_id); all three must match for two
    nodes to compare equal, so a reference kept from an older generation never
    matches its replacement. The neighbor list and the owning graph are
    excluded from identity.
    """
    name: str
    position: Position
    generation_id: int = 0
    neighbors: List["WANNode"] = field(default_factory=list, repr=False)
    # NodeGraph that holds this node's edges, set once by NodeGraph.add_node
    owner: Optional["NodeGraph"] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        # Positions are stored as a plain float tuple so they hash
        object.__setattr__(
            self, "position", tuple(float(c) for c in np.asarray(self.position, dtype=float).reshape(3))
        )

    def __eq__(self, other):
        if not isinstance(other, WANNode):
            return NotImplemented
        return (self.name == other.name
                and self.position == other.position
                and self.generation_id == other.generation_id)

    def __hash__(self):
        return hash((self.name, self.position, self.generation_id))

    @property
    def vector(self) -> np.ndarray:
        return np.array(self.position)

    @property
    def neighbor_names(self) -> List[str]:
        return [n.name for n in self.neighbors]

    def is_adjacent(self, other: "WANNode") -> bool:
        return other in self.neighbors


@dataclass(frozen=True)
class Edge:
    """Undirected link between two nodes.

    The weight is the Euclidean distance at creation time and is never
    recomputed.
    """
    source: WANNode
    target: WANNode
    weight: float

    @property
    def names(self) -> Tuple[str, str]:
        return self.source.name, self.target.name

    def other(self, node: WANNode) -> WANNode:
        if node == self.source:
            return self.target
        if node == self.target:
            return self.source
        raise InvalidArgumentError(f"Node {node.name} is not an endpoint of edge {self.names}")


NodeRef = Union[WANNode, str]


class NodeGraph:
    """Nodes of one generation batch plus their edges."""

    def __init__(self, nodes: Iterable[WANNode] = ()):
        self._nodes: List[WANNode] = []
        self._by_name: Dict[str, WANNode] = {}
        self._edge_map: Dict[Tuple[str, str], Edge] = {}
        self._edges: List[Edge] = []

        try:
            for node in nodes:
                self.add_node(node)
        except (InvalidArgumentError, InvalidConfigurationError):
            # Release the nodes already taken so they can join another graph
            for node in self._nodes:
                object.__setattr__(node, "owner", None)
            raise

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[WANNode]:
        return iter(self._nodes)

    def __contains__(self, item) -> bool:
        if isinstance(item, str):
            return item in self._by_name
        if isinstance(item, WANNode):
            return self._by_name.get(item.name) == item
        return False

    def __getitem__(self, name: str) -> WANNode:
        return self._by_name[name]

    @property
    def nodes(self) -> Tuple[WANNode, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    @property
    def generation_id(self) -> Optional[int]:
        """Generation tag shared by the nodes, None for an empty graph."""
        if not self._nodes:
            return None
        return self._nodes[0].generation_id

    def get(self, name: str) -> Optional[WANNode]:
        return self._by_name.get(name)

    def add_node(self, node: WANNode) -> None:
        if node is None:
            raise InvalidArgumentError("Cannot add a missing node to the graph")
        if node.owner is not None and node.owner is not self:
            raise InvalidArgumentError(f"Node {node.name!r} already belongs to another graph")
        if node.name in self._by_name:
            raise InvalidConfigurationError(f"Duplicate node name: {node.name!r}")
        self._nodes.append(node)
        self._by_name[node.name] = node
        object.__setattr__(node, "owner", self)

    def _resolve(self, ref: NodeRef) -> WANNode:
        if ref is None:
            raise InvalidArgumentError("Node reference is required")
        if isinstance(ref, str):
            node = self._by_name.get(ref)
            if node is None:
                raise KeyError(ref)
            return node
        if ref not in self:
            raise InvalidArgumentError(f"Node {ref.name!r} does not belong to this graph")
        return ref

    def neighbors(self, ref: NodeRef) -> Tuple[WANNode, ...]:
        return tuple(self._resolve(ref).neighbors)

    def get_edge(self, a: NodeRef, b: NodeRef) -> Optional[Edge]:
        """Look up the edge between two nodes, in either order."""
        if a is None or b is None:
            raise InvalidArgumentError("Node reference is required")
        name_a = a if isinstance(a, str) else a.name
        name_b = b if isinstance(b, str) else b.name
        return self._edge_map.get((name_a, name_b))

    def has_edge(self, a: NodeRef, b: NodeRef) -> bool:
        return self.get_edge(a, b) is not None

    def add_edge(self, a: NodeRef, b: NodeRef) -> Optional[Edge]:
        """
        Insert a bidirectional edge.

        Returns the new Edge, or None when the pair is already linked.
        """
        node_a = self._resolve(a)
        node_b = self._resolve(b)
        if node_a == node_b:
            raise InvalidArgumentError(f"Self-loop on {node_a.name!r} is not allowed")
        if self.has_edge(node_a, node_b):
            return None

        edge = Edge(node_a, node_b, distance(node_a.position, node_b.position))
        node_a.neighbors.append(node_b)
        node_b.neighbors.append(node_a)
        self._edge_map[(node_a.name, node_b.name)] = edge
        self._edge_map[(node_b.name, node_a.name)] = edge
        self._edges.append(edge)
        return edge

    def clear_edges(self) -> None:
        """Drop every edge and empty all neighbor lists."""
        for node in self._nodes:
            node.neighbors.clear()
        self._edge_map.clear()
        self._edges.clear()

    def is_symmetric(self) -> bool:
        """True when every neighbor listing is mirrored and self-loop free."""
        for node in self._nodes:
            for neighbor in node.neighbors:
                if neighbor == node or node not in neighbor.neighbors:
                    return False
        return True

    def degree_stats(self) -> Dict[str, float]:
        degrees = [len(n.neighbors) for n in self._nodes]
        if not degrees:
            return {"min": 0, "max": 0, "mean": 0.0, "isolated": 0}
        return {
            "min": min(degrees),
            "max": max(degrees),
            "mean": float(np.mean(degrees)),
            "isolated": sum(1 for d in degrees if d == 0),
        }
