"""
Selection State

Process-local view state for the flow explorer: which trace, node and edge
are selected, what is loaded, and which fetches are in flight.

PRINCIPLES:
1. Immutable (Frozen) - every transition produces a new state
2. Owned by one controller, passed down by reference
3. No Rendering Logic
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from flowview.config import DEFAULT_TIME_RANGE
from flowview.dtos import (
    FlowExplanationDTO, FlowGraphDTO, FlowStatsDTO, TraceSummaryDTO,
)


class TraceListPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class FlowPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ExplanationPhase(Enum):
    """Independent of FlowPhase: a READY flow may or may not have an explanation."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class TraceFilters:
    """Trace list filters; an empty service name means all services."""
    service_name: Optional[str] = None
    time_range: str = DEFAULT_TIME_RANGE


@dataclass(frozen=True)
class SelectionState:
    """
    Complete explorer state.

    `flow_sequence` tags every trace selection, `trace_list_sequence`
    every list load and `explanation_sequence` every explain request; a
    result is only applied when its tag is still current.
    """
    filters: TraceFilters = TraceFilters()

    # Trace list panel
    trace_list_phase: TraceListPhase = TraceListPhase.IDLE
    traces: Tuple[TraceSummaryDTO, ...] = ()
    services: Tuple[str, ...] = ()
    stats: Optional[FlowStatsDTO] = None
    trace_list_sequence: int = 0

    # Selection
    selected_trace_id: Optional[str] = None
    selected_node_id: Optional[str] = None
    selected_edge_id: Optional[str] = None

    # Graph canvas
    flow_phase: FlowPhase = FlowPhase.IDLE
    flow: Optional[FlowGraphDTO] = None
    flow_sequence: int = 0
    flow_error: Optional[str] = None

    # Detail panel
    explanation_phase: ExplanationPhase = ExplanationPhase.IDLE
    explanation: Optional[FlowExplanationDTO] = None
    explanation_sequence: int = 0

    # User-visible alert
    alert: Optional[str] = None

    @property
    def loading_traces(self) -> bool:
        return self.trace_list_phase == TraceListPhase.LOADING

    @property
    def loading_flow(self) -> bool:
        return self.flow_phase == FlowPhase.LOADING

    @property
    def loading_explanation(self) -> bool:
        return self.explanation_phase == ExplanationPhase.LOADING

    @property
    def selected_trace(self) -> Optional[TraceSummaryDTO]:
        for trace in self.traces:
            if trace.trace_id == self.selected_trace_id:
                return trace
        return None
