"""
Core WAN globe network functionality.
"""

from .errors import WANError, InvalidConfigurationError, InvalidArgumentError, NetworkNotGeneratedError
from .node_graph import WANNode, Edge, NodeGraph
from .sphere_points import distribute_nodes, fibonacci_directions, node_radius
from .connector import connect_neighbors, select_directional_neighbors, DEFAULT_ANGLE_THRESHOLD
from .pathfinder import find_shortest_path, discover_reachable, path_length
from .network import WANNetwork, Route, NetworkOptions

__all__ = ['WANError', 'InvalidConfigurationError', 'InvalidArgumentError', 'NetworkNotGeneratedError',
           'WANNode', 'Edge', 'NodeGraph',
           'distribute_nodes', 'fibonacci_directions', 'node_radius',
           'connect_neighbors', 'select_directional_neighbors', 'DEFAULT_ANGLE_THRESHOLD',
           'find_shortest_path', 'discover_reachable', 'path_length',
           'WANNetwork', 'Route', 'NetworkOptions']
