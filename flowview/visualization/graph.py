"""
Graph Visualization Contracts

Responsibility:
Deterministic transformation of a FlowGraphDTO into a renderable graph view.
The canvas only draws: classification and positions are computed here.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from flowview.dtos import (
    AvailabilityState, CallEdgeDTO, FlowGraphDTO, NodeType, ServiceNodeDTO,
)
from flowview.visualization import status
from flowview.visualization.layout import LayoutEntry, compute_layout


@dataclass(frozen=True)
class GraphNode:
    """Renderable, positioned service node."""
    node_id: str
    x: float
    y: float
    level: int
    label: str
    endpoint: Optional[str]
    method: Optional[str]
    type_badge: Optional[str]
    icon: str
    health_class: str
    color: str  # also used by the overview map
    latency_label: str
    latency_class: str
    error_rate_label: str
    error_rate_class: str
    request_count: Optional[int]
    is_selected: bool


@dataclass(frozen=True)
class GraphEdge:
    """Renderable edge; endpoints are node ids, the canvas resolves positions."""
    edge_id: str
    source_id: str
    target_id: str
    color: str
    category: str  # "failing", "slow" or ""
    is_animated: bool
    latency_label: str
    error_rate_label: Optional[str]  # None when the call has no errors
    error_color: Optional[str]
    protocol: Optional[str]
    is_selected: bool


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Pre-layouted network graph.
    Layout must be stable.
    """
    view_id: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    availability: AvailabilityState

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None


def to_graph_node(node: ServiceNodeDTO, entry: LayoutEntry, is_selected: bool) -> GraphNode:
    return GraphNode(
        node_id=node.node_id,
        x=entry.x,
        y=entry.y,
        level=entry.level,
        label=node.service_name,
        endpoint=node.endpoint,
        method=node.method,
        type_badge=None if node.node_type == NodeType.UNSPECIFIED else node.node_type.value,
        icon=status.node_icon(node.node_type),
        health_class=status.health_class(node.health),
        color=status.node_color(node.health),
        latency_label=status.format_latency(node.avg_latency),
        latency_class=status.latency_class(node.avg_latency),
        error_rate_label=status.format_error_rate(node.error_rate),
        error_rate_class=status.error_rate_class(node.error_rate),
        request_count=node.request_count,
        is_selected=is_selected,
    )


def to_graph_edge(edge: CallEdgeDTO, is_selected: bool) -> GraphEdge:
    error_rate = edge.metrics.error_rate
    return GraphEdge(
        edge_id=edge.edge_id,
        source_id=edge.source_node_id,
        target_id=edge.target_node_id,
        color=status.edge_color(edge.status),
        category=status.edge_category(edge.status),
        is_animated=status.is_edge_animated(edge.status),
        latency_label=status.format_latency(edge.metrics.avg_latency),
        error_rate_label=status.format_error_rate(error_rate) if error_rate > 0 else None,
        error_color=status.edge_error_color(error_rate),
        protocol=edge.protocol,
        is_selected=is_selected,
    )


def build_graph_view(
    graph: FlowGraphDTO,
    selected_node_id: Optional[str] = None,
    selected_edge_id: Optional[str] = None,
) -> NetworkGraphView:
    """
    Classify and lay out a flow graph.

    Selection flags are threaded into the render data; they never
    affect positions.
    """
    layout = compute_layout(
        [node.node_id for node in graph.nodes],
        [(edge.source_node_id, edge.target_node_id) for edge in graph.edges],
    )

    nodes = tuple(
        to_graph_node(node, layout[node.node_id], node.node_id == selected_node_id)
        for node in graph.nodes
    )
    edges = tuple(
        to_graph_edge(edge, edge.edge_id == selected_edge_id)
        for edge in graph.edges
    )

    return NetworkGraphView(
        view_id=graph.trace_id or "",
        nodes=nodes,
        edges=edges,
        availability=AvailabilityState.PRESENT,
    )


def empty_graph_view(view_id: str, availability: AvailabilityState) -> NetworkGraphView:
    """View with nothing to draw: no selection, still loading, or failed."""
    return NetworkGraphView(view_id=view_id, nodes=(), edges=(), availability=availability)
