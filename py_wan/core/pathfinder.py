"""
Shortest paths over the WAN graph.

The search first collects the component reachable from the start node with
a breadth-first walk, then runs Dijkstra's algorithm inside it using the
Euclidean distance between node positions as edge weight.

A result shorter than two nodes means "no path": it is returned for an
unreachable destination (``[end]``) and for ``start == end`` (``[start]``).
"""

import heapq
import math
from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from .errors import InvalidArgumentError
from .node_graph import WANNode
from .vector_math import distance

logger = structlog.get_logger()


def discover_reachable(start: WANNode) -> List[WANNode]:
    """
    Breadth-first discovery of every node connected to ``start``.

    Returns:
        Reachable nodes in discovery order, starting with ``start``
    """
    if start is None:
        raise InvalidArgumentError("Start node is required")

    visited = {start}
    order = [start]
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in current.neighbors:
            if neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                queue.append(neighbor)

    return order


def dijkstra(start: WANNode, end: Optional[WANNode] = None
             ) -> Tuple[Dict[WANNode, float], Dict[WANNode, Optional[WANNode]]]:
    """
    Tentative distances and predecessors from ``start``.

    The unprocessed node with the smallest distance is settled next, ties
    going to the node discovered first. Stops as soon as ``end`` is settled
    when one is given.

    Returns:
        (distances, previous) keyed by every reachable node
    """
    reachable = discover_reachable(start)
    discovery_index = {node: i for i, node in enumerate(reachable)}

    distances: Dict[WANNode, float] = {node: math.inf for node in reachable}
    previous: Dict[WANNode, Optional[WANNode]] = {node: None for node in reachable}
    distances[start] = 0.0

    # Heap entries: (distance, discovery index); stale entries are skipped
    heap = [(0.0, discovery_index[start])]
    settled = set()

    while heap:
        current_distance, index = heapq.heappop(heap)
        current = reachable[index]
        if current in settled or current_distance > distances[current]:
            continue
        settled.add(current)

        if current == end:
            break

        for neighbor in current.neighbors:
            if neighbor in settled:
                continue
            tentative = current_distance + distance(current.position, neighbor.position)
            if tentative < distances[neighbor]:
                distances[neighbor] = tentative
                previous[neighbor] = current
                heapq.heappush(heap, (tentative, discovery_index[neighbor]))

    return distances, previous


def find_shortest_path(start: WANNode, end: WANNode) -> List[WANNode]:
    """
    Shortest path from ``start`` to ``end``, both inclusive.

    Args:
        start: Source node
        end: Destination node

    Returns:
        Ordered node list. Fewer than two nodes means no path exists.
    """
    if start is None or end is None:
        raise InvalidArgumentError("Both start and end nodes are required")

    if start == end:
        return [start]

    distances, previous = dijkstra(start, end)

    path = []
    step = end
    while step is not None:
        path.append(step)
        if step == start:
            break
        step = previous.get(step)
    path.reverse()

    if path[0] != start:
        logger.info("No path found", start=start.name, end=end.name,
                    reachable=len(distances))
        return [end]

    logger.debug("Path found", start=start.name, end=end.name,
                 hops=len(path) - 1, distance=distances[end])
    return path


def path_length(path: Sequence[WANNode]) -> float:
    """Total Euclidean length along consecutive path nodes."""
    return sum(distance(a.position, b.position) for a, b in zip(path, path[1:]))
