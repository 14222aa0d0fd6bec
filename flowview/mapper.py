"""
API Payload to DTO Mapper

Converts raw tracing-backend records into read-only flow DTOs.

MAPPING BOUNDARY:
=================
This is the ONLY place where raw API payloads become DTOs.
All normalization happens here, nowhere else.

MAPPING RULES:
==============
1. Missing arrays reject the whole graph (MalformedGraphError)
2. Empty arrays are valid and produce an empty graph
3. Missing optional fields get explicit defaults (health -> HEALTHY, metrics -> 0)
4. Preserve backend ordering
5. Edges MUST reference known nodes; dangling edges are never dropped silently
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Tuple
import math
import re

from flowview.dtos import (
    DTOVersion, NodeType, NodeHealth, EdgeStatus, FlowStatus,
    ServiceNodeDTO, EdgeMetricsDTO, CallEdgeDTO, FlowGraphDTO,
    TraceSummaryDTO, FlowStatsDTO, FlowExplanationDTO,
)
from flowview.errors import MalformedGraphError, MalformedPayloadError


# Epoch values above this are milliseconds, below it seconds
_EPOCH_MILLIS_THRESHOLD = 1e11

_ISO_DURATION = re.compile(
    r"^PT(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?$"
)


class FlowGraphMapper:
    """
    Maps tracing API payloads to flow DTOs.

    SINGLE POINT OF CONVERSION:
    ===========================
    All payload -> DTO conversion goes through this class.
    Pure: no I/O, no state.
    """

    # =========================================================================
    # GRAPH MAPPING
    # =========================================================================

    def map_flow_graph(
        self,
        payload: Any,
        trace_id: Optional[str] = None,
    ) -> FlowGraphDTO:
        """Map a raw `{nodes, edges}` payload to a validated graph."""
        if not isinstance(payload, Mapping):
            raise MalformedGraphError("Flow graph payload must be an object")

        raw_nodes = self._require_list(payload, 'nodes')
        raw_edges = self._require_list(payload, 'edges')

        nodes = tuple(self.map_node(raw) for raw in raw_nodes)

        node_ids = set()
        for node in nodes:
            if node.node_id in node_ids:
                raise MalformedGraphError(f"Duplicate node id: {node.node_id}")
            node_ids.add(node.node_id)

        edges = tuple(self.map_edge(raw) for raw in raw_edges)

        edge_ids = set()
        for edge in edges:
            if edge.edge_id in edge_ids:
                raise MalformedGraphError(f"Duplicate edge id: {edge.edge_id}")
            edge_ids.add(edge.edge_id)
            for endpoint in (edge.source_node_id, edge.target_node_id):
                if endpoint not in node_ids:
                    raise MalformedGraphError(
                        f"Edge {edge.edge_id} references unknown node: {endpoint}"
                    )

        return FlowGraphDTO(
            dto_version=DTOVersion.current(),
            trace_id=trace_id if trace_id is not None else payload.get('traceId'),
            nodes=nodes,
            edges=edges,
        )

    def map_node(self, raw: Any) -> ServiceNodeDTO:
        """Map a single node record."""
        if not isinstance(raw, Mapping):
            raise MalformedGraphError("Node record must be an object")

        node_id = raw.get('id')
        if not node_id:
            raise MalformedGraphError("Node record missing id")
        node_id = str(node_id)

        return ServiceNodeDTO(
            node_id=node_id,
            service_name=raw.get('serviceName') or node_id,
            endpoint=raw.get('endpoint') or None,
            method=raw.get('method') or None,
            node_type=self._map_enum(NodeType, raw.get('type'), NodeType.UNSPECIFIED),
            health=self._map_enum(NodeHealth, raw.get('health'), NodeHealth.HEALTHY),
            avg_latency=self._latency_ms(raw.get('avgLatency')),
            error_rate=self._fraction(raw.get('errorRate')),
            request_count=self._optional_count(raw.get('requestCount')),
        )

    def map_edge(self, raw: Any) -> CallEdgeDTO:
        """Map a single edge record."""
        if not isinstance(raw, Mapping):
            raise MalformedGraphError("Edge record must be an object")

        source = raw.get('sourceNodeId')
        target = raw.get('targetNodeId')
        if not source or not target:
            raise MalformedGraphError("Edge record missing source or target node id")
        source, target = str(source), str(target)

        raw_metrics = raw.get('metrics') or {}
        if not isinstance(raw_metrics, Mapping):
            raise MalformedGraphError(f"Edge {source}->{target} has invalid metrics")

        metrics = EdgeMetricsDTO(
            avg_latency=self._latency_ms(raw_metrics.get('avgLatency')),
            error_rate=self._fraction(raw_metrics.get('errorRate')),
            p95_latency=(
                self._latency_ms(raw_metrics['p95Latency'])
                if raw_metrics.get('p95Latency') is not None else None
            ),
            request_count=self._optional_count(raw_metrics.get('requestCount')),
            timeout_count=self._optional_count(raw_metrics.get('timeoutCount')),
        )

        return CallEdgeDTO(
            edge_id=str(raw.get('id') or f"{source}->{target}"),
            source_node_id=source,
            target_node_id=target,
            metrics=metrics,
            status=self._map_enum(EdgeStatus, raw.get('status'), EdgeStatus.NORMAL),
            protocol=raw.get('protocol') or None,
        )

    # =========================================================================
    # TRACE LIST MAPPING
    # =========================================================================

    def map_trace_summary(self, raw: Any) -> TraceSummaryDTO:
        """Map one trace list entry."""
        if not isinstance(raw, Mapping) or not raw.get('traceId'):
            raise MalformedPayloadError("Trace summary missing traceId")

        return TraceSummaryDTO(
            dto_version=DTOVersion.current(),
            trace_id=str(raw['traceId']),
            root_service=raw.get('rootService') or "",
            root_endpoint=raw.get('rootEndpoint') or None,
            duration_ms=int(self._number(raw.get('durationMs'))),
            status=self._map_enum(FlowStatus, raw.get('status'), FlowStatus.SUCCESS),
            node_count=int(self._number(raw.get('nodeCount'))),
            has_bottleneck=bool(raw.get('hasBottleneck', False)),
            start_time=self._timestamp(raw.get('startTime')),
            bottleneck_service=raw.get('bottleneckService') or None,
        )

    def map_trace_list(self, raw: Any) -> Tuple[TraceSummaryDTO, ...]:
        """Map the trace list, preserving backend order."""
        if not isinstance(raw, list):
            raise MalformedPayloadError("Trace list must be an array")
        return tuple(self.map_trace_summary(item) for item in raw)

    def map_services(self, raw: Any) -> Tuple[str, ...]:
        if not isinstance(raw, list):
            raise MalformedPayloadError("Service list must be an array")
        return tuple(str(s) for s in raw)

    def map_stats(self, raw: Any) -> FlowStatsDTO:
        """Map flow statistics."""
        if not isinstance(raw, Mapping):
            raise MalformedPayloadError("Flow stats must be an object")

        return FlowStatsDTO(
            total_flows=int(self._number(raw.get('totalFlows'))),
            successful_flows=int(self._number(raw.get('successfulFlows'))),
            failed_flows=int(self._number(raw.get('failedFlows'))),
            service_count=int(self._number(raw.get('serviceCount'))),
        )

    def map_explanation(self, raw: Any) -> FlowExplanationDTO:
        """Map an AI explanation. Recommendations default to empty."""
        if not isinstance(raw, Mapping):
            raise MalformedPayloadError("Explanation must be an object")

        recommendations = raw.get('recommendations') or []
        if not isinstance(recommendations, list):
            raise MalformedPayloadError("Explanation recommendations must be an array")

        return FlowExplanationDTO(
            summary=raw.get('summary') or "",
            bottleneck_service=raw.get('bottleneckService') or None,
            root_cause=raw.get('rootCause') or None,
            recommendations=tuple(str(r) for r in recommendations),
            estimated_impact=raw.get('estimatedImpact') or None,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _require_list(self, payload: Mapping, key: str) -> List[Any]:
        value = payload.get(key)
        if value is None:
            raise MalformedGraphError(f"Flow graph payload missing '{key}'")
        if not isinstance(value, list):
            raise MalformedGraphError(f"Flow graph '{key}' must be an array")
        return value

    def _map_enum(self, enum_cls, value: Any, default):
        """Map an enum name, falling back to the explicit default."""
        if value is None:
            return default
        try:
            return enum_cls(str(value).upper())
        except ValueError:
            return default

    def _number(self, value: Any) -> float:
        if value is None:
            return 0.0
        if isinstance(value, bool):
            raise MalformedPayloadError(f"Expected a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise MalformedPayloadError(f"Expected a number, got {value!r}") from None
        # json accepts NaN and Infinity
        if not math.isfinite(number):
            raise MalformedPayloadError(f"Expected a finite number, got {value!r}")
        return number

    def _latency_ms(self, value: Any) -> float:
        """
        Latency in milliseconds.

        Accepts plain millisecond numbers or ISO-8601 durations ("PT0.25S").
        """
        if isinstance(value, str):
            match = _ISO_DURATION.match(value.strip().upper())
            if match and any(match.groupdict().values()):
                parts = {k: float(v) if v else 0.0 for k, v in match.groupdict().items()}
                seconds = parts['hours'] * 3600 + parts['minutes'] * 60 + parts['seconds']
                return self._number(seconds * 1000)
        return max(0.0, self._number(value))

    def _fraction(self, value: Any) -> float:
        return min(1.0, max(0.0, self._number(value)))

    def _optional_count(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return max(0, int(self._number(value)))

    def _timestamp(self, value: Any) -> Optional[datetime]:
        if value is None or value == "":
            return None
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace('Z', '+00:00'))
            except ValueError:
                raise MalformedPayloadError(f"Invalid timestamp: {value!r}") from None
        epoch = self._number(value)
        if epoch > _EPOCH_MILLIS_THRESHOLD:
            epoch /= 1000
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise MalformedPayloadError(f"Timestamp out of range: {value!r}") from None
