"""Python WAN globe network: node placement, neighbor linking and routing."""

__version__ = "0.1.0"
