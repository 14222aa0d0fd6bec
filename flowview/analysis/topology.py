"""
Flow Topology
=============

Structural analysis of a trace's call graph using graph topology.

Computes geometry (counts, components, cycles, paths) and surfaces the
backend-reported signals the detail panel needs (failing nodes, slowest
call). It never re-derives health or status.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

import networkx as nx

from flowview.dtos import CallEdgeDTO, FlowGraphDTO, NodeHealth


@dataclass(frozen=True)
class FlowMetrics:
    """Immutable structural metrics for a flow graph."""
    node_count: int
    edge_count: int
    component_count: int
    is_acyclic: bool
    cyclic_component_count: int  # Strongly connected components that contain a cycle
    max_depth: Optional[int] = None  # Longest call chain, acyclic graphs only


class FlowTopology:
    """
    Structural view over one FlowGraphDTO.

    Wraps NetworkX; parallel calls between the same pair of nodes are
    kept as separate edges.
    """

    def __init__(self):
        self._graph = nx.MultiDiGraph()
        self._flow: Optional[FlowGraphDTO] = None

    def build_graph(self, flow: FlowGraphDTO) -> None:
        """
        Build graph from a flow.

        Replaces internal graph state.
        """
        self._graph = nx.MultiDiGraph()
        self._flow = flow

        for node in flow.nodes:
            self._graph.add_node(node.node_id, health=node.health)

        for edge in flow.edges:
            self._graph.add_edge(
                edge.source_node_id,
                edge.target_node_id,
                key=edge.edge_id,
                avg_latency=edge.metrics.avg_latency,
            )

    def compute_metrics(self) -> FlowMetrics:
        if not self._graph:
            return FlowMetrics(0, 0, 0, True, 0, None)

        simple = nx.DiGraph(self._graph)
        is_acyclic = nx.is_directed_acyclic_graph(simple)
        cyclic_components = 0 if is_acyclic else self._count_cyclic_components(simple)

        return FlowMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            component_count=nx.number_weakly_connected_components(self._graph),
            is_acyclic=is_acyclic,
            cyclic_component_count=cyclic_components,
            max_depth=nx.dag_longest_path_length(simple) if is_acyclic else None,
        )

    @staticmethod
    def _count_cyclic_components(graph: nx.DiGraph) -> int:
        """
        Components with at least one cycle: more than one node, or a self-loop.

        Linear in graph size; simple cycles are never enumerated.
        """
        count = 0
        for component in nx.strongly_connected_components(graph):
            node = next(iter(component))
            if len(component) > 1 or graph.has_edge(node, node):
                count += 1
        return count

    def has_failures(self) -> bool:
        """True if any node is reported as FAILING."""
        return any(
            health == NodeHealth.FAILING
            for _, health in self._graph.nodes(data='health')
        )

    def find_bottleneck_edge(self) -> Optional[CallEdgeDTO]:
        """The call with the highest average latency; first one wins on ties."""
        if self._flow is None or not self._flow.edges:
            return None
        return max(self._flow.edges, key=lambda e: e.metrics.avg_latency)

    def total_edge_latency(self) -> float:
        """Sum of average latencies over all calls, in milliseconds."""
        return sum(
            latency for _, _, latency in self._graph.edges(data='avg_latency')
        )

    def get_call_path(self, source_id: str, target_id: str) -> Optional[List[str]]:
        """
        Shortest call chain between two nodes, following call direction.
        """
        try:
            return nx.shortest_path(self._graph, source=source_id, target=target_id)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    def clear(self):
        self._graph.clear()
        self._flow = None
