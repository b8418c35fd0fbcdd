"""
Directional nearest-neighbor linking.

Every node looks at the other nodes within an angular threshold (measured
from the globe center) and, in its own tangent frame, keeps the closest
candidate on each side: right (+x), left (-x), front (+z) and back (-z).
Each winner gets a bidirectional edge. The pass is a full rebuild: all
previous adjacency is cleared first.

Because edges are mirrored while other nodes are processed, a node can end
up with more than four neighbors. Only symmetry is guaranteed.
"""

import math
import numbers
from typing import Dict, Sequence, Union

import numpy as np
import structlog

from .errors import InvalidArgumentError, InvalidConfigurationError
from .node_graph import NodeGraph, WANNode
from .vector_math import FORWARD, angles_from, from_to_rotation

logger = structlog.get_logger()

DEFAULT_ANGLE_THRESHOLD = 60.0

# Bucket name -> (local axis index, sign)
DIRECTION_BUCKETS = {
    "Right": (0, 1),
    "Left": (0, -1),
    "Front": (2, 1),
    "Back": (2, -1),
}


def _validate_threshold(angle_threshold) -> float:
    if isinstance(angle_threshold, bool) or not isinstance(angle_threshold, numbers.Real):
        raise InvalidConfigurationError(
            f"Angle threshold must be a number of degrees, got {angle_threshold!r}")
    if not math.isfinite(angle_threshold) or angle_threshold < 0:
        raise InvalidConfigurationError(
            f"Angle threshold must be a non-negative finite angle, got {angle_threshold}")
    return float(angle_threshold)


def _as_graph(nodes: Union[NodeGraph, Sequence[WANNode]]) -> NodeGraph:
    if nodes is None:
        raise InvalidArgumentError("A node collection is required")
    if isinstance(nodes, NodeGraph):
        return nodes
    nodes = list(nodes)
    if any(node is None for node in nodes):
        raise InvalidArgumentError("Node collection contains a missing node reference")

    # Nodes already held by a graph are relinked inside it, so its edge
    # lookup stays in step with their neighbor lists
    owners = {id(node.owner): node.owner for node in nodes}
    if len(owners) == 1:
        owner = next(iter(owners.values()))
        if owner is not None and len(owner) == len(nodes) and set(owner) == set(nodes):
            return owner
    return NodeGraph(nodes)


def select_directional_neighbors(origin: WANNode, candidates: Sequence[WANNode],
                                 angle_threshold: float = DEFAULT_ANGLE_THRESHOLD) -> Dict[str, WANNode]:
    """
    Pick the nearest candidate per direction bucket around ``origin``.

    Candidates equal to the origin or already adjacent to it are skipped,
    as are candidates further than ``angle_threshold`` degrees around the
    globe. Buckets are compared independently, so one candidate may win
    both an x bucket and a z bucket. Ties keep the first candidate seen.

    All candidates are rotated into the origin's frame in one batch.

    Returns:
        Mapping of bucket name to the winning node, only for filled buckets
    """
    candidates = list(candidates)
    eligible = np.array([candidate != origin and not origin.is_adjacent(candidate)
                         for candidate in candidates], dtype=bool)
    if not eligible.any():
        return {}

    points = np.array([candidate.position for candidate in candidates], dtype=float)
    center = origin.vector
    eligible &= angles_from(center, points) <= angle_threshold

    deltas = points - center
    local = from_to_rotation(center, FORWARD).apply(deltas)
    gaps = np.linalg.norm(deltas, axis=1)

    winners: Dict[str, WANNode] = {}
    for bucket, (axis, sign) in DIRECTION_BUCKETS.items():
        in_bucket = eligible & (local[:, axis] * sign > 0)
        if not in_bucket.any():
            continue
        # argmin returns the first minimum, so ties keep candidate order
        index = int(np.argmin(np.where(in_bucket, gaps, np.inf)))
        winners[bucket] = candidates[index]

    return winners


def connect_neighbors(nodes: Union[NodeGraph, Sequence[WANNode]],
                      angle_threshold: float = DEFAULT_ANGLE_THRESHOLD) -> NodeGraph:
    """
    Rebuild all adjacency with directional nearest neighbors.

    Args:
        nodes: A NodeGraph, or a plain node sequence. A sequence holding exactly
            the nodes of one graph is relinked in that graph; free nodes get
            wrapped in a new one.
        angle_threshold: Maximum great-circle angle in degrees between linked nodes

    Returns:
        The graph holding the nodes and the new edges
    """
    angle_threshold = _validate_threshold(angle_threshold)
    graph = _as_graph(nodes)

    graph.clear_edges()

    if len(graph) < 2:
        logger.info("Too few nodes to connect", nodes=len(graph))
        return graph

    members = graph.nodes
    for origin in members:
        winners = select_directional_neighbors(origin, members, angle_threshold)
        for neighbor in winners.values():
            graph.add_edge(origin, neighbor)

    stats = graph.degree_stats()
    logger.info("Neighbors connected",
                nodes=len(graph), edges=len(graph.edges),
                angle_threshold=angle_threshold,
                max_degree=stats["max"], isolated=stats["isolated"])
    return graph
