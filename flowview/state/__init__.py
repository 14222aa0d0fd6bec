"""
State Layer

Explicit, immutable explorer state. Transitions live in
flowview.interaction.reducer.
"""

from .selection import (
    SelectionState, TraceFilters, TraceListPhase, FlowPhase, ExplanationPhase,
)

__all__ = [
    'SelectionState', 'TraceFilters', 'TraceListPhase', 'FlowPhase', 'ExplanationPhase',
]
