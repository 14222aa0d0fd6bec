"""
DTO Contract Tests

TEST CATEGORIES:
================
1. Immutability - DTOs cannot be mutated
2. Versioning - Unknown versions fail fast
3. Explicit absence - missing values are None or explicit defaults
"""

from dataclasses import FrozenInstanceError, fields

import pytest

from flowview.dtos import (
    DTOVersion, FlowGraphDTO, TraceSummaryDTO, FlowStatus,
)
from flowview.mapper import FlowGraphMapper
from flowview.state import SelectionState
from flowview.visualization import build_graph_view


@pytest.fixture
def mapper():
    return FlowGraphMapper()


class TestDTOImmutability:
    """All DTOs MUST be frozen (immutable)."""

    def test_graph_is_frozen(self, mapper, checkout_payload):
        flow = mapper.map_flow_graph(checkout_payload)

        with pytest.raises(FrozenInstanceError):
            flow.trace_id = "modified"
        with pytest.raises(FrozenInstanceError):
            flow.nodes[0].health = None
        with pytest.raises(FrozenInstanceError):
            flow.edges[0].metrics.avg_latency = 0

    def test_collections_are_tuples(self, mapper, checkout_payload):
        flow = mapper.map_flow_graph(checkout_payload)
        assert isinstance(flow.nodes, tuple)
        assert isinstance(flow.edges, tuple)

    def test_view_is_frozen(self, mapper, checkout_payload):
        view = build_graph_view(mapper.map_flow_graph(checkout_payload))
        with pytest.raises(FrozenInstanceError):
            view.nodes[0].x = 0.0

    def test_state_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            SelectionState().selected_trace_id = 't'


class TestVersioning:

    def test_top_level_dtos_are_versioned(self):
        for dto in (FlowGraphDTO, TraceSummaryDTO):
            assert 'dto_version' in {f.name for f in fields(dto)}

    def test_unknown_version_rejected(self):
        with pytest.raises(ValueError):
            FlowGraphDTO(dto_version="v0", trace_id=None, nodes=(), edges=())

        with pytest.raises(ValueError):
            TraceSummaryDTO(
                dto_version="v2", trace_id='t', root_service='s', root_endpoint=None,
                duration_ms=0, status=FlowStatus.SUCCESS, node_count=0,
                has_bottleneck=False, start_time=None,
            )

    def test_mapper_stamps_current_version(self, mapper, checkout_payload):
        assert mapper.map_flow_graph(checkout_payload).dto_version == DTOVersion.current()


class TestLookups:

    def test_get_node_and_edge(self, mapper, checkout_payload):
        flow = mapper.map_flow_graph(checkout_payload)
        assert flow.get_node('db').service_name == 'db'
        assert flow.get_node('nope') is None
        assert flow.get_edge('orders-db').target_node_id == 'db'
        assert flow.get_edge('nope') is None
