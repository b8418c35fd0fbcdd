"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Tuple
import structlog

from .. import __version__
from ..config import settings
from ..core.errors import InvalidArgumentError, InvalidConfigurationError, NetworkNotGeneratedError
from ..core.network import WANNetwork
from ..core.node_graph import Edge, WANNode
from ..utils.log_config import configure_logging

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="WAN Globe Network API",
    description="Node placement, neighbor linking and shortest paths on a globe",
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Current network shared by all endpoints
network = WANNetwork(settings)


# Request/Response models
class NetworkGenerationRequest(BaseModel):
    """Request to (re)generate the network."""

    node_count: Optional[int] = Field(None, ge=0, le=2000, description="Number of nodes to place")
    radius: Optional[float] = Field(None, gt=0, description="Placement radius, defaults to globe radius x multiplier")
    names: Optional[List[str]] = Field(None, description="Custom names for the first nodes")
    angle_threshold: Optional[float] = Field(
        None, ge=0, le=180, description="Maximum great-circle angle between linked nodes (degrees)"
    )


class NodeView(BaseModel):
    """Read-only view of one node for the renderer."""

    name: str
    position: Tuple[float, float, float]
    generation_id: int
    neighbors: List[str]


class EdgeView(BaseModel):
    """Read-only view of one link."""

    source: str
    target: str
    weight: float


class NetworkSummary(BaseModel):
    """Overview of the current network."""

    generation_id: int
    node_count: int
    edge_count: int
    radius: float
    angle_threshold: float
    isolated_nodes: int
    max_degree: int


class RouteResponse(BaseModel):
    """Shortest path between two nodes."""

    source: str
    target: str
    found: bool
    hops: int
    distance: float
    path: List[NodeView]


def _node_view(node: WANNode) -> NodeView:
    return NodeView(
        name=node.name,
        position=node.position,
        generation_id=node.generation_id,
        neighbors=node.neighbor_names,
    )


def _edge_view(edge: Edge) -> EdgeView:
    source, target = edge.names
    return EdgeView(source=source, target=target, weight=edge.weight)


def _summary() -> NetworkSummary:
    graph = network.graph
    stats = graph.degree_stats()
    return NetworkSummary(
        generation_id=network.generation_id,
        node_count=len(graph),
        edge_count=len(graph.edges),
        radius=network.options.radius,
        angle_threshold=network.options.angle_threshold,
        isolated_nodes=stats["isolated"],
        max_degree=stats["max"],
    )


def _require_network():
    if not network.is_generated:
        raise HTTPException(status_code=409, detail="No network generated")
    return network.graph


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Log startup."""
    logger.info("Starting WAN Globe Network API")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down WAN Globe Network API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "WAN Globe Network API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "network": "generated" if network.is_generated else "empty",
        "generation_id": network.generation_id,
    }


@app.post("/network/generate", response_model=NetworkSummary)
def generate_network(request: NetworkGenerationRequest):
    """
    Replace the current network with a newly generated one.

    Plain ``def`` so the linking pass runs in the threadpool instead of
    blocking the event loop.
    """
    logger.info("Network generation requested", request=request.model_dump())

    try:
        network.regenerate(
            count=request.node_count,
            radius=request.radius,
            names=request.names,
            angle_threshold=request.angle_threshold,
        )
    except InvalidConfigurationError as e:
        logger.error("Network generation rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return _summary()


@app.get("/network", response_model=NetworkSummary)
async def get_network():
    """Summary of the current network."""
    _require_network()
    return _summary()


@app.delete("/network")
async def reset_network():
    """Drop the current network."""
    network.clear()
    return {"status": "cleared"}


@app.get("/network/nodes", response_model=List[NodeView])
async def list_nodes():
    """All nodes with positions and neighbor names."""
    graph = _require_network()
    return [_node_view(node) for node in graph.nodes]


@app.get("/network/nodes/{name}", response_model=NodeView)
async def get_node(name: str):
    """One node by name."""
    _require_network()
    try:
        return _node_view(network.get_node(name))
    except KeyError:
        raise HTTPException(status_code=404, detail="Node not found")


@app.get("/network/edges", response_model=List[EdgeView])
async def list_edges():
    """All links with their weights."""
    graph = _require_network()
    return [_edge_view(edge) for edge in graph.edges]


@app.get("/network/path", response_model=RouteResponse)
async def get_path(source: str, target: str):
    """
    Shortest path between two named nodes.

    ``found`` is false when the nodes are the same or not connected.
    """
    _require_network()
    try:
        route = network.find_route(source, target)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Node not found: {e.args[0]}")
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NetworkNotGeneratedError:
        raise HTTPException(status_code=409, detail="No network generated")

    return RouteResponse(
        source=route.source,
        target=route.target,
        found=route.found,
        hops=route.hops,
        distance=route.distance,
        path=[_node_view(node) for node in route.nodes],
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
