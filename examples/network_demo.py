#!/usr/bin/env python3
"""
Demonstration of WAN network generation and routing on a globe.

This script shows:
1. Fibonacci-sphere node placement
2. Directional nearest-neighbor linking
3. Shortest path queries, including the "no path" cases
4. Regeneration replacing the whole network
"""

import argparse

from py_wan.core import WANNetwork, distribute_nodes, connect_neighbors, find_shortest_path, path_length
from py_wan.config import Settings
from py_wan.utils.log_config import configure_logging


def main():
    parser = argparse.ArgumentParser(description="WAN globe network demo")
    parser.add_argument("--nodes", type=int, default=40, help="Number of nodes")
    parser.add_argument("--radius", type=float, default=0.51, help="Placement radius")
    parser.add_argument("--threshold", type=float, default=60.0, help="Angle threshold in degrees")
    parser.add_argument("--log-format", default="plain", help="plain or json")
    args = parser.parse_args()

    configure_logging("WARNING", args.log_format)

    print("=== WAN Globe Network Demo ===\n")

    # 1. Place nodes
    print("1. Placing nodes on the sphere...")
    names = ["Japan", "Brazil", "Kenya", "Norway"]
    nodes = distribute_nodes(args.nodes, args.radius, names)
    print(f"   - Placed {len(nodes)} nodes at radius {args.radius}")
    print(f"   - First nodes: {', '.join(n.name for n in nodes[:6])}")

    # 2. Link neighbors
    print("\n2. Linking directional neighbors...")
    graph = connect_neighbors(nodes, args.threshold)
    stats = graph.degree_stats()
    print(f"   - Edges: {len(graph.edges)}")
    print(f"   - Degree min/mean/max: {stats['min']}/{stats['mean']:.2f}/{stats['max']}")
    print(f"   - Isolated nodes: {stats['isolated']}")
    print(f"   - Symmetric adjacency: {graph.is_symmetric()}")

    # 3. Route between the first and last node
    print("\n3. Finding shortest paths...")
    if len(nodes) >= 2:
        path = find_shortest_path(nodes[0], nodes[-1])
        if len(path) >= 2:
            print(f"   - {nodes[0].name} -> {nodes[-1].name}: {' -> '.join(n.name for n in path)}")
            print(f"   - Length: {path_length(path):.4f}")
        else:
            print(f"   - No path between {nodes[0].name} and {nodes[-1].name}")
        same = find_shortest_path(nodes[0], nodes[0])
        print(f"   - Same start/end returns {len(same)} node (not a path)")

    # 4. Regeneration through the orchestrator
    print("\n4. Regenerating through WANNetwork...")
    network = WANNetwork(Settings(node_count=args.nodes, angle_threshold=args.threshold))
    first = network.regenerate(names=names)
    old_node = first.nodes[0]
    network.regenerate(names=names)
    new_node = network.get_node(old_node.name)
    print(f"   - Generation: {network.generation_id}")
    print(f"   - Old reference equals new node: {old_node == new_node}")

    if len(network.nodes) >= 2:
        route = network.find_route(network.nodes[0].name, network.nodes[-1].name)
        print(f"   - Route found: {route.found}, hops: {route.hops}, distance: {route.distance:.4f}")


if __name__ == "__main__":
    main()
