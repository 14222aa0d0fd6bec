from .topology import FlowTopology, FlowMetrics

__all__ = ['FlowTopology', 'FlowMetrics']
