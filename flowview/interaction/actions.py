"""
Interaction Contracts

Responsibility:
Define valid user actions and fetch completions, and their intent.
No execution logic - just pure intent modeling.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from flowview.dtos import (
    FlowExplanationDTO, FlowGraphDTO, FlowStatsDTO, TraceSummaryDTO,
)
from flowview.state import TraceFilters


class ActionType(Enum):
    """Types of state transition."""
    # Trace list
    LOAD_TRACES_STARTED = "load_traces_started"
    LOAD_TRACES_SUCCEEDED = "load_traces_succeeded"
    LOAD_TRACES_FAILED = "load_traces_failed"

    # Flow graph
    SELECT_TRACE = "select_trace"
    FLOW_LOADED = "flow_loaded"
    FLOW_FAILED = "flow_failed"

    # Explanation
    EXPLAIN_STARTED = "explain_started"
    EXPLANATION_LOADED = "explanation_loaded"
    EXPLANATION_FAILED = "explanation_failed"

    # Canvas selection
    SELECT_NODE = "select_node"
    SELECT_EDGE = "select_edge"
    CLEAR_SELECTION = "clear_selection"

    DISMISS_ALERT = "dismiss_alert"


@dataclass(frozen=True)
class Action:
    """A specific transition request."""
    action: ActionType
    payload: Mapping[str, Any] = field(default_factory=dict)


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def load_traces_started(filters: TraceFilters, sequence: int) -> Action:
    return Action(ActionType.LOAD_TRACES_STARTED, {'filters': filters, 'sequence': sequence})


def load_traces_succeeded(
    sequence: int,
    traces: Tuple[TraceSummaryDTO, ...],
    services: Tuple[str, ...],
    stats: Optional[FlowStatsDTO],
) -> Action:
    return Action(ActionType.LOAD_TRACES_SUCCEEDED, {
        'sequence': sequence, 'traces': traces, 'services': services, 'stats': stats,
    })


def load_traces_failed(sequence: int, error: str) -> Action:
    return Action(ActionType.LOAD_TRACES_FAILED, {'sequence': sequence, 'error': error})


def select_trace(trace_id: str) -> Action:
    return Action(ActionType.SELECT_TRACE, {'trace_id': trace_id})


def flow_loaded(sequence: int, flow: FlowGraphDTO) -> Action:
    return Action(ActionType.FLOW_LOADED, {'sequence': sequence, 'flow': flow})


def flow_failed(sequence: int, error: str) -> Action:
    return Action(ActionType.FLOW_FAILED, {'sequence': sequence, 'error': error})


def explain_started(trace_id: str) -> Action:
    return Action(ActionType.EXPLAIN_STARTED, {'trace_id': trace_id})


def explanation_loaded(sequence: int, explanation: FlowExplanationDTO) -> Action:
    return Action(ActionType.EXPLANATION_LOADED, {'sequence': sequence, 'explanation': explanation})


def explanation_failed(sequence: int, error: str) -> Action:
    return Action(ActionType.EXPLANATION_FAILED, {'sequence': sequence, 'error': error})


def select_node(node_id: str) -> Action:
    return Action(ActionType.SELECT_NODE, {'node_id': node_id})


def select_edge(edge_id: str) -> Action:
    return Action(ActionType.SELECT_EDGE, {'edge_id': edge_id})


def clear_selection() -> Action:
    return Action(ActionType.CLEAR_SELECTION)


def dismiss_alert() -> Action:
    return Action(ActionType.DISMISS_ALERT)
