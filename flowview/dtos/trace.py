"""
Trace List DTOs

Summaries, aggregate stats and AI explanations surfaced next to the graph.
All values are backend-provided; nothing here is computed locally.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .core import DTOVersion, FlowStatus


@dataclass(frozen=True)
class TraceSummaryDTO:
    """One entry in the trace list."""
    dto_version: DTOVersion
    trace_id: str
    root_service: str
    root_endpoint: Optional[str]
    duration_ms: int
    status: FlowStatus
    node_count: int
    has_bottleneck: bool
    start_time: Optional[datetime]
    bottleneck_service: Optional[str] = None

    def __post_init__(self):
        if self.dto_version != DTOVersion.current():
            raise ValueError(f"Unknown DTO version: {self.dto_version}")


@dataclass(frozen=True)
class FlowStatsDTO:
    """Aggregate counters over the lookback window."""
    total_flows: int
    successful_flows: int
    failed_flows: int
    service_count: int


@dataclass(frozen=True)
class FlowExplanationDTO:
    """
    AI-generated explanation of a flow.

    DISPLAY ONLY: generated upstream, never interpreted here.
    """
    summary: str
    bottleneck_service: Optional[str]
    root_cause: Optional[str]
    recommendations: Tuple[str, ...]
    estimated_impact: Optional[str]
