"""
Flow Graph DTOs

Immutable node/edge records for one trace's call graph.
Built fresh on every fetch and discarded on the next selection.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .core import DTOVersion, EdgeStatus, NodeHealth, NodeType


@dataclass(frozen=True)
class ServiceNodeDTO:
    """A service/endpoint node in the flow graph."""
    node_id: str
    service_name: str
    endpoint: Optional[str]
    method: Optional[str]
    node_type: NodeType
    health: NodeHealth
    avg_latency: float  # milliseconds
    error_rate: float   # fraction in [0, 1]
    request_count: Optional[int]


@dataclass(frozen=True)
class EdgeMetricsDTO:
    """Performance metrics of a call edge."""
    avg_latency: float  # milliseconds
    error_rate: float
    p95_latency: Optional[float] = None
    request_count: Optional[int] = None
    timeout_count: Optional[int] = None


@dataclass(frozen=True)
class CallEdgeDTO:
    """
    A call between two nodes.

    Both endpoints MUST reference nodes of the same graph.
    """
    edge_id: str
    source_node_id: str
    target_node_id: str
    metrics: EdgeMetricsDTO
    status: EdgeStatus
    protocol: Optional[str]


@dataclass(frozen=True)
class FlowGraphDTO:
    """
    Node/edge graph of a single trace.

    May contain cycles and disconnected components.
    Node order is the backend order and drives layout determinism.
    """
    dto_version: DTOVersion
    trace_id: Optional[str]
    nodes: Tuple[ServiceNodeDTO, ...]
    edges: Tuple[CallEdgeDTO, ...]

    def __post_init__(self):
        if self.dto_version != DTOVersion.current():
            raise ValueError(f"Unknown DTO version: {self.dto_version}")

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Optional[ServiceNodeDTO]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[CallEdgeDTO]:
        for edge in self.edges:
            if edge.edge_id == edge_id:
                return edge
        return None
