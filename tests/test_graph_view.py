"""
Graph View Tests

Render data is derived from DTOs only; selection never moves nodes.
"""

import pytest

from flowview.dtos import AvailabilityState
from flowview.mapper import FlowGraphMapper
from flowview.visualization import build_graph_view, empty_graph_view


@pytest.fixture
def flow(checkout_payload):
    return FlowGraphMapper().map_flow_graph(checkout_payload)


class TestGraphView:

    def test_nodes_are_classified(self, flow):
        view = build_graph_view(flow)
        payments = view.get_node('payments')

        assert view.view_id == 'trace-1'
        assert view.availability == AvailabilityState.PRESENT
        assert payments.health_class == 'failing'
        assert payments.color == '#ef4444'
        assert payments.latency_class == 'bad'
        assert payments.latency_label == '1.5s'
        assert payments.error_rate_label == '20.0%'
        assert payments.type_badge == 'EXTERNAL'

    def test_unspecified_type_has_no_badge(self, flow):
        orders = build_graph_view(flow).get_node('orders')
        assert orders.type_badge is None
        assert orders.latency_class == 'warning'
        assert orders.error_rate_class == 'warning'

    def test_positions_follow_call_depth(self, flow):
        view = build_graph_view(flow)
        assert [(n.node_id, n.level) for n in view.nodes] == [
            ('gateway', 0), ('orders', 1), ('db', 2), ('payments', 2),
        ]

    def test_edges(self, flow):
        edges = {e.edge_id: e for e in build_graph_view(flow).edges}

        failing = edges['orders-payments']
        assert failing.is_animated is True
        assert failing.category == 'failing'
        assert failing.error_color == '#ef4444'
        assert edges['orders-db'].error_rate_label is None
        assert edges['orders-db'].is_animated is False

    def test_selection_does_not_move_nodes(self, flow):
        plain = build_graph_view(flow)
        selected = build_graph_view(flow, selected_node_id='orders')

        assert [(n.x, n.y) for n in plain.nodes] == [(n.x, n.y) for n in selected.nodes]
        assert [n.node_id for n in selected.nodes if n.is_selected] == ['orders']

    def test_edge_selection(self, flow):
        view = build_graph_view(flow, selected_edge_id='orders-db')
        assert [e.edge_id for e in view.edges if e.is_selected] == ['orders-db']
        assert not any(n.is_selected for n in view.nodes)

    def test_empty_view(self):
        view = empty_graph_view('t', AvailabilityState.LOADING)
        assert view.nodes == () and view.edges == ()
        assert view.availability == AvailabilityState.LOADING
