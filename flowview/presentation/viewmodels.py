"""
Presentation Contracts

Responsibility:
Define ViewModel contracts for the trace list, stats header and detail
panel, and build them from SelectionState.
Strictly decoupled from fetching and layout.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from flowview.dtos import FlowStatus, TraceSummaryDTO
from flowview.state import SelectionState

_STATUS_CLASSES = {
    FlowStatus.FAILURE: "status-failure",
    FlowStatus.PARTIAL_FAILURE: "status-partial",
}


@dataclass(frozen=True)
class TraceCardViewModel:
    """ViewModel for a Trace Card in the list."""
    trace_id: str
    title: str
    subtitle: str
    status_class: str    # e.g. "status-failure"
    status_label: str    # e.g. "PARTIAL_FAILURE"
    duration_label: str  # e.g. "120ms"
    node_count_label: str
    start_time_label: Optional[str]
    has_bottleneck: bool
    is_selected: bool


@dataclass(frozen=True)
class StatsViewModel:
    """Header counters. Absent when stats failed to load."""
    total_flows: int
    successful_flows: int
    failed_flows: int
    service_count: int


@dataclass(frozen=True)
class FlowDetailsViewModel:
    """Detail panel for the selected trace."""
    trace_id: str
    root_service: str
    duration_label: str
    status_class: str
    status_label: str
    node_count: int


@dataclass(frozen=True)
class ExplanationViewModel:
    summary: str
    bottleneck_service: Optional[str]
    root_cause: Optional[str]
    recommendations: Tuple[str, ...]
    impact_class: Optional[str]  # e.g. "impact-high"


@dataclass(frozen=True)
class LoadingStateViewModel:
    """Unified loading state."""
    message: str
    progress: Optional[float]
    is_blocking: bool


def status_class(status: FlowStatus) -> str:
    return _STATUS_CLASSES.get(status, "status-success")


def build_trace_card(trace: TraceSummaryDTO, selected_trace_id: Optional[str]) -> TraceCardViewModel:
    return TraceCardViewModel(
        trace_id=trace.trace_id,
        title=trace.root_service,
        subtitle=trace.root_endpoint or "N/A",
        status_class=status_class(trace.status),
        status_label=trace.status.value,
        duration_label=f"{trace.duration_ms}ms",
        node_count_label=f"{trace.node_count} nodes",
        start_time_label=trace.start_time.strftime("%H:%M:%S") if trace.start_time else None,
        has_bottleneck=trace.has_bottleneck,
        is_selected=trace.trace_id == selected_trace_id,
    )


def build_trace_cards(state: SelectionState) -> Tuple[TraceCardViewModel, ...]:
    """Cards in backend order."""
    return tuple(build_trace_card(t, state.selected_trace_id) for t in state.traces)


def build_stats(state: SelectionState) -> Optional[StatsViewModel]:
    if state.stats is None:
        return None
    return StatsViewModel(
        total_flows=state.stats.total_flows,
        successful_flows=state.stats.successful_flows,
        failed_flows=state.stats.failed_flows,
        service_count=state.stats.service_count,
    )


def build_flow_details(state: SelectionState) -> Optional[FlowDetailsViewModel]:
    trace = state.selected_trace
    if trace is None:
        return None
    return FlowDetailsViewModel(
        trace_id=trace.trace_id,
        root_service=trace.root_service,
        duration_label=f"{trace.duration_ms}ms",
        status_class=status_class(trace.status),
        status_label=trace.status.value,
        node_count=trace.node_count,
    )


def build_explanation(state: SelectionState) -> Optional[ExplanationViewModel]:
    explanation = state.explanation
    if explanation is None:
        return None
    return ExplanationViewModel(
        summary=explanation.summary,
        bottleneck_service=explanation.bottleneck_service,
        root_cause=explanation.root_cause,
        recommendations=explanation.recommendations,
        impact_class=(
            f"impact-{explanation.estimated_impact.lower()}"
            if explanation.estimated_impact else None
        ),
    )


def build_loading_states(state: SelectionState) -> Tuple[LoadingStateViewModel, ...]:
    """
    Active loading indicators.

    Only the trace list blocks its panel; the flow overlay keeps the
    previous graph visible.
    """
    loading = []
    if state.loading_traces:
        loading.append(LoadingStateViewModel("Loading traces...", None, True))
    if state.loading_flow:
        loading.append(LoadingStateViewModel("Loading flow graph...", None, False))
    if state.loading_explanation:
        loading.append(LoadingStateViewModel("Analyzing...", None, False))
    return tuple(loading)
