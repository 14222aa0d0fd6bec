from .viewmodels import (
    TraceCardViewModel, StatsViewModel, FlowDetailsViewModel,
    ExplanationViewModel, LoadingStateViewModel,
    build_trace_cards, build_stats, build_flow_details,
    build_explanation, build_loading_states,
)

__all__ = [
    'TraceCardViewModel', 'StatsViewModel', 'FlowDetailsViewModel',
    'ExplanationViewModel', 'LoadingStateViewModel',
    'build_trace_cards', 'build_stats', 'build_flow_details',
    'build_explanation', 'build_loading_states',
]
