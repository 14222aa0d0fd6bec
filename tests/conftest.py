"""Shared fixtures: raw tracing API payloads."""

import pytest


def raw_node(node_id, **fields):
    record = {'id': node_id, 'serviceName': fields.pop('serviceName', node_id)}
    record.update(fields)
    return record


def raw_edge(source, target, **fields):
    record = {
        'id': fields.pop('id', f"{source}-{target}"),
        'sourceNodeId': source,
        'targetNodeId': target,
        'metrics': fields.pop('metrics', {'avgLatency': 10, 'errorRate': 0}),
    }
    record.update(fields)
    return record


@pytest.fixture
def checkout_payload():
    """gateway -> orders -> {db, payments}, payments failing."""
    return {
        'traceId': 'trace-1',
        'nodes': [
            raw_node('gateway', type='ENTRY', health='HEALTHY', avgLatency=40, errorRate=0),
            raw_node('orders', endpoint='/orders', method='POST', avgLatency=620, errorRate=0.02),
            raw_node('db', type='DATABASE', avgLatency=12, errorRate=0),
            raw_node('payments', type='EXTERNAL', health='FAILING', avgLatency=1460, errorRate=0.2),
        ],
        'edges': [
            raw_edge('gateway', 'orders', metrics={'avgLatency': 600, 'errorRate': 0}),
            raw_edge('orders', 'db', metrics={'avgLatency': 12, 'errorRate': 0}),
            raw_edge('orders', 'payments', status='FAILING', protocol='HTTP',
                     metrics={'avgLatency': 1450, 'errorRate': 0.2, 'p95Latency': 2100}),
        ],
    }


@pytest.fixture
def trace_list_payload():
    return [
        {
            'traceId': 'trace-1', 'rootService': 'gateway', 'rootEndpoint': '/checkout',
            'durationMs': 1520, 'status': 'PARTIAL_FAILURE', 'nodeCount': 4,
            'hasBottleneck': True, 'startTime': '2024-03-01T10:15:30Z',
            'bottleneckService': 'payments',
        },
        {
            'traceId': 'trace-2', 'rootService': 'gateway', 'durationMs': 80,
            'status': 'SUCCESS', 'nodeCount': 2, 'hasBottleneck': False,
            'startTime': 1709288130000,
        },
    ]


@pytest.fixture
def stats_payload():
    return {'totalFlows': 120, 'successfulFlows': 110, 'failedFlows': 10, 'serviceCount': 7}
