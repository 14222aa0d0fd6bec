"""
Visualization Layer

Status classification, deterministic layout and the render contract
handed to the drawing surface.
"""

from .layout import LayoutEntry, compute_layout, H_SPACING, V_SPACING, Y_OFFSET
from .graph import (
    GraphNode, GraphEdge, NetworkGraphView, build_graph_view, empty_graph_view,
)

__all__ = [
    'LayoutEntry', 'compute_layout', 'H_SPACING', 'V_SPACING', 'Y_OFFSET',
    'GraphNode', 'GraphEdge', 'NetworkGraphView', 'build_graph_view', 'empty_graph_view',
]
