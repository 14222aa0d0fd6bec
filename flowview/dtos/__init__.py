"""
Flow DTO Package

Read-only, immutable Data Transfer Objects for the flow view.

BOUNDARY ENFORCEMENT:
=====================
1. All DTOs are frozen (immutable)
2. Top-level DTOs are versioned
3. Renderers receive ONLY these types, never raw API payloads
4. Missing data is EXPLICIT, never inferred
"""

from .core import (
    DTOVersion,
    AvailabilityState,
    NodeType,
    NodeHealth,
    EdgeStatus,
    FlowStatus,
)

from .graph import ServiceNodeDTO, EdgeMetricsDTO, CallEdgeDTO, FlowGraphDTO
from .trace import TraceSummaryDTO, FlowStatsDTO, FlowExplanationDTO

__all__ = [
    # Enums
    'DTOVersion',
    'AvailabilityState',
    'NodeType',
    'NodeHealth',
    'EdgeStatus',
    'FlowStatus',
    # Graph
    'ServiceNodeDTO',
    'EdgeMetricsDTO',
    'CallEdgeDTO',
    'FlowGraphDTO',
    # Trace list
    'TraceSummaryDTO',
    'FlowStatsDTO',
    'FlowExplanationDTO',
]
