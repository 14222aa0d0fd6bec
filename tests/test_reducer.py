"""
Reducer Tests
=============

TEST CATEGORIES:
================
1. Purity - same state + action -> same result, input untouched
2. Staleness - superseded completions return the state object unchanged
3. Selection - node/edge toggling and mutual exclusion
4. Failure handling - what each failure clears and surfaces
"""

import pytest

from flowview.dtos import FlowExplanationDTO, FlowStatsDTO
from flowview.interaction import Action, ActionType, reduce
from flowview.interaction import actions
from flowview.mapper import FlowGraphMapper
from flowview.state import (
    ExplanationPhase, FlowPhase, SelectionState, TraceFilters, TraceListPhase,
)


@pytest.fixture
def flow(checkout_payload):
    return FlowGraphMapper().map_flow_graph(checkout_payload)


@pytest.fixture
def explanation():
    return FlowExplanationDTO("slow payments", "payments", None, (), "HIGH")


def loaded(flow, trace_id='trace-1'):
    state = reduce(SelectionState(), actions.select_trace(trace_id))
    return reduce(state, actions.flow_loaded(state.flow_sequence, flow))


class TestPurity:

    def test_same_input_same_output(self):
        state = SelectionState()
        action = actions.select_trace('t1')
        assert reduce(state, action) == reduce(state, action)

    def test_input_state_untouched(self):
        state = SelectionState()
        reduce(state, actions.select_trace('t1'))
        assert state.selected_trace_id is None
        assert state.flow_sequence == 0

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            reduce(SelectionState(), Action("bogus"))


class TestTraceList:

    def test_load_lifecycle(self, stats_payload):
        filters = TraceFilters(service_name='gateway', time_range='6h')
        state = reduce(SelectionState(), actions.load_traces_started(filters, 1))

        assert state.loading_traces
        assert state.filters == filters

        stats = FlowStatsDTO(1, 1, 0, 1)
        state = reduce(state, actions.load_traces_succeeded(1, (), ('gateway',), stats))
        assert state.trace_list_phase == TraceListPhase.READY
        assert state.services == ('gateway',)
        assert state.stats == stats

    def test_stale_list_result_ignored(self):
        state = reduce(SelectionState(), actions.load_traces_started(TraceFilters(), 1))
        state = reduce(state, actions.load_traces_started(TraceFilters(time_range='15m'), 2))

        stale = reduce(state, actions.load_traces_succeeded(1, (), ('old',), None))
        assert stale is state

    def test_failure_empties_list_and_hides_stats(self):
        state = SelectionState(services=('gateway',), stats=FlowStatsDTO(1, 1, 0, 1))
        state = reduce(state, actions.load_traces_started(TraceFilters(), 1))
        state = reduce(state, actions.load_traces_failed(1, "boom"))

        assert state.trace_list_phase == TraceListPhase.READY
        assert state.traces == ()
        assert state.stats is None
        assert state.services == ('gateway',)
        assert state.alert is None


class TestFlowSelection:

    def test_select_trace_starts_loading(self, flow):
        state = loaded(flow)
        state = reduce(state, actions.select_node('orders'))
        state = reduce(state, actions.select_trace('trace-2'))

        assert state.loading_flow
        assert state.selected_trace_id == 'trace-2'
        assert state.selected_node_id is None
        assert state.flow is flow  # previous graph stays under the overlay
        assert state.flow_sequence == 2

    def test_latest_selection_wins(self, flow):
        state = reduce(SelectionState(), actions.select_trace('t1'))
        first_seq = state.flow_sequence
        state = reduce(state, actions.select_trace('t2'))
        second_seq = state.flow_sequence

        assert reduce(state, actions.flow_loaded(first_seq, flow)) is state

        state = reduce(state, actions.flow_loaded(second_seq, flow))
        assert state.flow_phase == FlowPhase.READY
        assert state.flow is flow

    def test_stale_failure_ignored(self):
        state = reduce(SelectionState(), actions.select_trace('t1'))
        state = reduce(state, actions.select_trace('t2'))
        assert reduce(state, actions.flow_failed(1, "gone")) is state

    def test_failure_clears_graph(self, flow):
        state = reduce(loaded(flow), actions.select_trace('missing'))
        state = reduce(state, actions.flow_failed(state.flow_sequence, "Flow not found: missing"))

        assert state.flow is None
        assert state.flow_phase == FlowPhase.FAILED
        assert state.flow_error == "Flow not found: missing"
        assert state.alert is None

    def test_select_trace_resets_explanation(self, flow, explanation):
        state = loaded(flow)
        state = reduce(state, actions.explain_started('trace-1'))
        state = reduce(state, actions.explanation_loaded(state.explanation_sequence, explanation))
        state = reduce(state, actions.select_trace('trace-2'))

        assert state.explanation is None
        assert state.explanation_phase == ExplanationPhase.IDLE


class TestCanvasSelection:

    def test_node_toggle(self, flow):
        state = reduce(loaded(flow), actions.select_node('db'))
        assert state.selected_node_id == 'db'
        state = reduce(state, actions.select_node('db'))
        assert state.selected_node_id is None

    def test_node_and_edge_exclusive(self, flow):
        state = reduce(loaded(flow), actions.select_node('db'))
        state = reduce(state, actions.select_edge('orders-db'))
        assert (state.selected_node_id, state.selected_edge_id) == (None, 'orders-db')

        state = reduce(state, actions.select_node('orders'))
        assert (state.selected_node_id, state.selected_edge_id) == ('orders', None)

    def test_clear_selection(self, flow):
        state = reduce(loaded(flow), actions.select_edge('orders-db'))
        state = reduce(state, actions.clear_selection())
        assert state.selected_edge_id is None
        assert state.flow is flow


class TestExplanation:

    def test_requires_selected_trace(self):
        state = SelectionState()
        assert reduce(state, actions.explain_started('t1')) is state

    def test_success(self, flow, explanation):
        state = reduce(loaded(flow), actions.explain_started('trace-1'))
        assert state.loading_explanation

        state = reduce(state, actions.explanation_loaded(state.explanation_sequence, explanation))
        assert state.explanation_phase == ExplanationPhase.READY
        assert state.explanation == explanation

    def test_failure_raises_alert(self, flow):
        state = reduce(loaded(flow), actions.explain_started('trace-1'))
        state = reduce(state, actions.explanation_failed(state.explanation_sequence, "HTTP 500"))

        assert state.explanation_phase == ExplanationPhase.IDLE
        assert state.alert == "Failed to get explanation: HTTP 500"

        state = reduce(state, actions.dismiss_alert())
        assert state.alert is None

    def test_result_for_deselected_trace_ignored(self, flow, explanation):
        state = reduce(loaded(flow), actions.explain_started('trace-1'))
        request = state.explanation_sequence
        state = reduce(state, actions.select_trace('trace-2'))

        assert reduce(state, actions.explanation_loaded(request, explanation)) is state
        assert reduce(state, actions.explanation_failed(request, "HTTP 500")) is state

    def test_earlier_request_for_reselected_trace_ignored(self, flow, explanation):
        """T1 explain, T2, back to T1, explain again: only the second request lands."""
        state = reduce(loaded(flow), actions.explain_started('trace-1'))
        first_request = state.explanation_sequence
        state = reduce(state, actions.select_trace('trace-2'))
        state = reduce(state, actions.select_trace('trace-1'))
        state = reduce(state, actions.flow_loaded(state.flow_sequence, flow))

        assert reduce(state, actions.explanation_failed(first_request, "late")) is state

        state = reduce(state, actions.explain_started('trace-1'))
        second_request = state.explanation_sequence
        assert second_request != first_request

        assert reduce(state, actions.explanation_failed(first_request, "late")) is state
        assert reduce(state, actions.explanation_loaded(first_request, explanation)) is state

        state = reduce(state, actions.explanation_loaded(second_request, explanation))
        assert state.explanation_phase == ExplanationPhase.READY
        assert state.alert is None

    def test_result_without_pending_request_ignored(self, flow, explanation):
        state = loaded(flow)
        assert reduce(state, actions.explanation_loaded(state.explanation_sequence, explanation)) is state


class TestActionTypes:

    def test_every_action_type_is_handled(self):
        state = SelectionState()
        for action_type in ActionType:
            payload = {
                'filters': TraceFilters(), 'sequence': 0, 'traces': (), 'services': (),
                'stats': None, 'trace_id': 't', 'flow': None, 'error': 'e',
                'explanation': None, 'node_id': 'n', 'edge_id': 'e',
            }
            reduce(state, Action(action_type, payload))
