"""
Node placement on the globe.

Nodes are spread over the sphere with the Fibonacci-sphere (golden ratio)
method: evenly spaced heights, with each point turned by an irrational
fraction of a full circle so no two points share a meridian. The output is
fully deterministic for a given count, radius and name list.
"""

import math
import numbers
from typing import List, Optional, Sequence

import numpy as np
import structlog

from .errors import InvalidConfigurationError
from .node_graph import WANNode

logger = structlog.get_logger()

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2
ANGLE_INCREMENT = math.pi * 2 * GOLDEN_RATIO

DEFAULT_RADIUS_MULTIPLIER = 1.02


def _validate_count(count) -> int:
    if isinstance(count, bool) or not isinstance(count, numbers.Integral):
        raise InvalidConfigurationError(f"Node count must be an integer, got {count!r}")
    if count < 0:
        raise InvalidConfigurationError(f"Node count must be non-negative, got {count}")
    return int(count)


def _validate_radius(radius) -> float:
    if isinstance(radius, bool) or not isinstance(radius, numbers.Real):
        raise InvalidConfigurationError(f"Radius must be a real number, got {radius!r}")
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidConfigurationError(f"Radius must be positive and finite, got {radius}")
    return float(radius)


def node_radius(earth_radius: float, radius_multiplier: float = DEFAULT_RADIUS_MULTIPLIER) -> float:
    """Placement radius for nodes floating just above a globe of ``earth_radius``."""
    earth_radius = _validate_radius(earth_radius)
    radius_multiplier = _validate_radius(radius_multiplier)
    return earth_radius * radius_multiplier


def fibonacci_directions(count: int) -> np.ndarray:
    """
    Unit directions for ``count`` points spread evenly over a sphere.

    Args:
        count: Number of points

    Returns:
        Array of shape (count, 3)
    """
    count = _validate_count(count)
    if count == 0:
        return np.zeros((0, 3))

    indices = np.arange(count, dtype=float)
    t = indices / count
    inclination = np.arccos(1 - 2 * t)
    azimuth = ANGLE_INCREMENT * indices

    directions = np.column_stack([
        np.sin(inclination) * np.cos(azimuth),
        np.sin(inclination) * np.sin(azimuth),
        np.cos(inclination),
    ])
    norms = np.linalg.norm(directions, axis=1, keepdims=True)
    return directions / norms


def resolve_names(count: int, names: Optional[Sequence[Optional[str]]] = None) -> List[str]:
    """Custom names for the first entries, ``Node{i}`` for the rest."""
    names = list(names or [])
    resolved = []
    for i in range(count):
        custom = names[i] if i < len(names) else None
        resolved.append(custom if custom and custom.strip() else f"Node{i}")

    seen = set()
    for name in resolved:
        if name in seen:
            raise InvalidConfigurationError(f"Duplicate node name: {name!r}")
        seen.add(name)
    return resolved


def distribute_nodes(count: int, radius: float,
                     names: Optional[Sequence[Optional[str]]] = None,
                     generation_id: int = 0) -> List[WANNode]:
    """
    Place ``count`` named nodes on a sphere of the given radius.

    Args:
        count: Number of nodes, zero gives an empty list
        radius: Sphere radius the directions are scaled to
        names: Optional custom names, used in order for the first nodes
        generation_id: Batch tag stamped onto every node

    Returns:
        Nodes in index order, without any neighbors
    """
    count = _validate_count(count)
    radius = _validate_radius(radius)
    node_names = resolve_names(count, names)

    directions = fibonacci_directions(count)
    positions = directions * radius

    nodes = [
        WANNode(name, tuple(position), generation_id)
        for name, position in zip(node_names, positions)
    ]

    logger.info("Nodes distributed",
                count=count, radius=radius, generation_id=generation_id,
                custom_names=sum(1 for n in list(names or [])[:count] if n))
    return nodes
