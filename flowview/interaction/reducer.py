"""
Selection Reducer

Pure transition function over SelectionState.

INVARIANT: reduce(state, action) is a PURE FUNCTION
Same state + same action -> identical next state.
Stale completions (superseded sequence or trace) return the state unchanged.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Callable, Dict

from flowview.state import (
    ExplanationPhase, FlowPhase, SelectionState, TraceListPhase,
)

from .actions import Action, ActionType


# =============================================================================
# TRACE LIST
# =============================================================================

def _load_traces_started(state: SelectionState, payload) -> SelectionState:
    return replace(
        state,
        filters=payload['filters'],
        trace_list_phase=TraceListPhase.LOADING,
        trace_list_sequence=payload['sequence'],
    )


def _load_traces_succeeded(state: SelectionState, payload) -> SelectionState:
    if payload['sequence'] != state.trace_list_sequence:
        return state
    return replace(
        state,
        trace_list_phase=TraceListPhase.READY,
        traces=tuple(payload['traces']),
        services=tuple(payload['services']),
        stats=payload['stats'],
    )


def _load_traces_failed(state: SelectionState, payload) -> SelectionState:
    # Operator-facing only: no alert, empty list, stats hidden
    if payload['sequence'] != state.trace_list_sequence:
        return state
    return replace(
        state,
        trace_list_phase=TraceListPhase.READY,
        traces=(),
        stats=None,
    )


# =============================================================================
# FLOW GRAPH
# =============================================================================

def _select_trace(state: SelectionState, payload) -> SelectionState:
    # The previous graph stays visible under the loading overlay
    return replace(
        state,
        selected_trace_id=payload['trace_id'],
        selected_node_id=None,
        selected_edge_id=None,
        flow_phase=FlowPhase.LOADING,
        flow_sequence=state.flow_sequence + 1,
        flow_error=None,
        explanation_phase=ExplanationPhase.IDLE,
        explanation=None,
        explanation_sequence=state.explanation_sequence + 1,
    )


def _flow_loaded(state: SelectionState, payload) -> SelectionState:
    if payload['sequence'] != state.flow_sequence:
        return state
    return replace(
        state,
        flow_phase=FlowPhase.READY,
        flow=payload['flow'],
        flow_error=None,
    )


def _flow_failed(state: SelectionState, payload) -> SelectionState:
    if payload['sequence'] != state.flow_sequence:
        return state
    return replace(
        state,
        flow_phase=FlowPhase.FAILED,
        flow=None,
        flow_error=payload['error'],
    )


# =============================================================================
# EXPLANATION
# =============================================================================

def _explain_started(state: SelectionState, payload) -> SelectionState:
    if state.selected_trace_id is None or payload['trace_id'] != state.selected_trace_id:
        return state
    return replace(
        state,
        explanation_phase=ExplanationPhase.LOADING,
        explanation_sequence=state.explanation_sequence + 1,
        alert=None,
    )


def _explanation_loaded(state: SelectionState, payload) -> SelectionState:
    if (payload['sequence'] != state.explanation_sequence
            or state.explanation_phase != ExplanationPhase.LOADING):
        return state
    return replace(
        state,
        explanation_phase=ExplanationPhase.READY,
        explanation=payload['explanation'],
    )


def _explanation_failed(state: SelectionState, payload) -> SelectionState:
    if (payload['sequence'] != state.explanation_sequence
            or state.explanation_phase != ExplanationPhase.LOADING):
        return state
    return replace(
        state,
        explanation_phase=ExplanationPhase.IDLE,
        alert=f"Failed to get explanation: {payload['error']}",
    )


# =============================================================================
# CANVAS SELECTION
# =============================================================================

def _select_node(state: SelectionState, payload) -> SelectionState:
    node_id = payload['node_id']
    if node_id == state.selected_node_id:
        return replace(state, selected_node_id=None)
    return replace(state, selected_node_id=node_id, selected_edge_id=None)


def _select_edge(state: SelectionState, payload) -> SelectionState:
    edge_id = payload['edge_id']
    if edge_id == state.selected_edge_id:
        return replace(state, selected_edge_id=None)
    return replace(state, selected_edge_id=edge_id, selected_node_id=None)


def _clear_selection(state: SelectionState, payload) -> SelectionState:
    return replace(state, selected_node_id=None, selected_edge_id=None)


def _dismiss_alert(state: SelectionState, payload) -> SelectionState:
    if state.alert is None:
        return state
    return replace(state, alert=None)


_HANDLERS: Dict[ActionType, Callable[[SelectionState, dict], SelectionState]] = {
    ActionType.LOAD_TRACES_STARTED: _load_traces_started,
    ActionType.LOAD_TRACES_SUCCEEDED: _load_traces_succeeded,
    ActionType.LOAD_TRACES_FAILED: _load_traces_failed,
    ActionType.SELECT_TRACE: _select_trace,
    ActionType.FLOW_LOADED: _flow_loaded,
    ActionType.FLOW_FAILED: _flow_failed,
    ActionType.EXPLAIN_STARTED: _explain_started,
    ActionType.EXPLANATION_LOADED: _explanation_loaded,
    ActionType.EXPLANATION_FAILED: _explanation_failed,
    ActionType.SELECT_NODE: _select_node,
    ActionType.SELECT_EDGE: _select_edge,
    ActionType.CLEAR_SELECTION: _clear_selection,
    ActionType.DISMISS_ALERT: _dismiss_alert,
}


def reduce(state: SelectionState, action: Action) -> SelectionState:
    """Apply one action and return the next state."""
    handler = _HANDLERS.get(action.action)
    if handler is None:
        raise ValueError(f"Unhandled action: {action.action}")
    return handler(state, action.payload)
