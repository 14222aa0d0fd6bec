"""
Flow Explorer Controller

Owns the SelectionState and the asynchronous fetch lifecycle behind it.

LAYER FLOW:
===========
1. User action -> reducer transition (loading flags, selection)
2. Fetch via FlowApiClient
3. FlowGraphMapper normalizes the payload
4. Completion tagged with its sequence -> reducer (stale results dropped)
5. graph_view() classifies and lays out for the canvas

I/O failures are caught here, logged for operators and turned into state.
Anything else propagates.
"""

from __future__ import annotations
from typing import Any, Awaitable, Callable, List, Optional, Tuple
import asyncio
import logging

from flowview.analysis import FlowTopology
from flowview.config import FlowViewConfig
from flowview.dtos import AvailabilityState, FlowGraphDTO
from flowview.errors import FlowNotFoundError, FlowViewError
from flowview.mapper import FlowGraphMapper
from flowview.state import FlowPhase, SelectionState, TraceFilters
from flowview.visualization import NetworkGraphView, build_graph_view, empty_graph_view

from . import actions
from .actions import Action
from .reducer import reduce

logger = logging.getLogger(__name__)

StateListener = Callable[[SelectionState], None]


async def gather_or_abort(*aws: Awaitable[Any]) -> List[Any]:
    """Run fetches concurrently; the first failure cancels the rest and propagates."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class FlowExplorerController:
    """
    State container for the trace list, graph canvas and detail panel.

    Single-threaded: every method runs on the event loop, state is only
    replaced through dispatch().
    """

    def __init__(
        self,
        client,
        config: Optional[FlowViewConfig] = None,
        mapper: Optional[FlowGraphMapper] = None,
    ):
        self._client = client
        self._config = config or FlowViewConfig()
        self._mapper = mapper or FlowGraphMapper()
        self._state = SelectionState(
            filters=TraceFilters(time_range=self._config.default_time_range)
        )
        self._listeners: List[StateListener] = []
        self._view_key: Optional[Tuple[FlowGraphDTO, Optional[str], Optional[str]]] = None
        self._view: Optional[NetworkGraphView] = None

    @property
    def state(self) -> SelectionState:
        return self._state

    # =========================================================================
    # STATE CONTAINER
    # =========================================================================

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> SelectionState:
        next_state = reduce(self._state, action)
        if next_state is not self._state:
            self._state = next_state
            for listener in list(self._listeners):
                listener(next_state)
        else:
            logger.debug("No state change for %s", action.action.value)
        return self._state

    # =========================================================================
    # TRACE LIST
    # =========================================================================

    async def load(self, filters: Optional[TraceFilters] = None) -> None:
        """Load trace list, services and stats together (mount, filter change, refresh)."""
        filters = filters or self._state.filters
        sequence = self._state.trace_list_sequence + 1
        self.dispatch(actions.load_traces_started(filters, sequence))

        lookback_ms = self._config.lookback_ms(filters.time_range)
        try:
            raw_traces, raw_services, raw_stats = await gather_or_abort(
                self._client.fetch_traces(
                    service_name=filters.service_name or None,
                    limit=self._config.trace_limit,
                    lookback_ms=lookback_ms,
                ),
                self._client.fetch_services(),
                self._client.fetch_stats(lookback_ms),
            )
            traces = self._mapper.map_trace_list(raw_traces)
            services = self._mapper.map_services(raw_services)
            stats = self._mapper.map_stats(raw_stats)
        except FlowViewError as e:
            logger.warning("Failed to load flow data: %s", e)
            self.dispatch(actions.load_traces_failed(sequence, str(e)))
            return

        logger.debug("Loaded %d traces for %s", len(traces), filters)
        self.dispatch(actions.load_traces_succeeded(sequence, traces, services, stats))

    async def set_filters(
        self,
        service_name: Optional[str] = None,
        time_range: Optional[str] = None,
    ) -> None:
        filters = TraceFilters(
            service_name=service_name or None,
            time_range=time_range or self._state.filters.time_range,
        )
        await self.load(filters)

    async def refresh(self) -> None:
        await self.load()

    # =========================================================================
    # FLOW GRAPH
    # =========================================================================

    async def select_trace(self, trace_id: str) -> None:
        """Select a trace and fetch its flow graph; the latest selection wins."""
        self.dispatch(actions.select_trace(trace_id))
        sequence = self._state.flow_sequence

        try:
            raw = await self._client.fetch_flow(trace_id)
            flow = self._mapper.map_flow_graph(raw, trace_id=trace_id)
        except FlowNotFoundError as e:
            logger.info("%s", e)
            self.dispatch(actions.flow_failed(sequence, str(e)))
            return
        except FlowViewError as e:
            logger.warning("Failed to load flow %s: %s", trace_id, e)
            self.dispatch(actions.flow_failed(sequence, str(e)))
            return

        self.dispatch(actions.flow_loaded(sequence, flow))

    # =========================================================================
    # EXPLANATION
    # =========================================================================

    async def explain(self) -> None:
        """Request an AI explanation for the selected trace."""
        trace_id = self._state.selected_trace_id
        if trace_id is None or self._state.loading_explanation:
            return

        self.dispatch(actions.explain_started(trace_id))
        sequence = self._state.explanation_sequence

        try:
            raw = await self._client.explain_flow(trace_id)
            explanation = self._mapper.map_explanation(raw)
        except FlowViewError as e:
            logger.warning("Failed to get explanation for %s: %s", trace_id, e)
            self.dispatch(actions.explanation_failed(sequence, e.message))
            return

        self.dispatch(actions.explanation_loaded(sequence, explanation))

    # =========================================================================
    # CANVAS
    # =========================================================================

    def click_node(self, node_id: str) -> None:
        self.dispatch(actions.select_node(node_id))

    def click_edge(self, edge_id: str) -> None:
        self.dispatch(actions.select_edge(edge_id))

    def clear_selection(self) -> None:
        self.dispatch(actions.clear_selection())

    def dismiss_alert(self) -> None:
        self.dispatch(actions.dismiss_alert())

    def graph_view(self) -> NetworkGraphView:
        """
        Render data for the canvas.

        While a new flow loads the previous graph is returned; callers show
        the loading flag as an overlay.
        """
        state = self._state
        flow = state.flow
        if flow is None:
            return empty_graph_view(state.selected_trace_id or "", self._absent_availability(state))

        key = (flow, state.selected_node_id, state.selected_edge_id)
        if self._view_key is None or self._view_key[0] is not flow or self._view_key[1:] != key[1:]:
            self._view = build_graph_view(flow, state.selected_node_id, state.selected_edge_id)
            self._view_key = key
        return self._view

    def topology(self) -> Optional[FlowTopology]:
        """Structural view of the current flow, if any."""
        flow: Optional[FlowGraphDTO] = self._state.flow
        if flow is None:
            return None
        topology = FlowTopology()
        topology.build_graph(flow)
        return topology

    def _absent_availability(self, state: SelectionState) -> AvailabilityState:
        if state.flow_phase == FlowPhase.LOADING:
            return AvailabilityState.LOADING
        if state.flow_phase == FlowPhase.FAILED:
            return AvailabilityState.MISSING
        return AvailabilityState.UNKNOWN
