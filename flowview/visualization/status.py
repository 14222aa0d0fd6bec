"""
Status Classification

Pure mapping of raw latency, error-rate, health and edge status values
to discrete display categories.

NOTE: This is the ONLY place where thresholds are applied.
Renderers display the categories, they never recompute them.
"""

from __future__ import annotations
from typing import Dict, Optional

from flowview.dtos import EdgeStatus, NodeHealth, NodeType


# ------------------------------------------------------------------ #
# Thresholds
# ------------------------------------------------------------------ #

LATENCY_BAD_MS = 1000
LATENCY_WARNING_MS = 500

ERROR_RATE_BAD = 0.05
ERROR_RATE_WARNING = 0.01

# ------------------------------------------------------------------ #
# Shared palette (canvas and overview map)
# ------------------------------------------------------------------ #

PALETTE: Dict[str, str] = {
    "failing": "#ef4444",  # red
    "warning": "#f59e0b",  # amber
    "timeout": "#dc2626",  # dark red
    "ok": "#10b981",       # green
}

EDGE_COLOR_KEYS: Dict[EdgeStatus, str] = {
    EdgeStatus.FAILING: "failing",
    EdgeStatus.SLOW: "warning",
    EdgeStatus.TIMEOUT: "timeout",
}

NODE_COLOR_KEYS: Dict[NodeHealth, str] = {
    NodeHealth.FAILING: "failing",
    NodeHealth.DEGRADED: "warning",
}

NODE_ICONS: Dict[NodeType, str] = {
    NodeType.ENTRY: "🚀",
    NodeType.DATABASE: "🗄️",
    NodeType.EXTERNAL: "🌐",
    NodeType.MESSAGING: "📨",
    NodeType.CACHE: "⚡",
}
DEFAULT_NODE_ICON = "📦"

_ANIMATED_STATUSES = frozenset({EdgeStatus.SLOW, EdgeStatus.FAILING})


# ------------------------------------------------------------------ #
# Node classification
# ------------------------------------------------------------------ #

def latency_class(avg_latency_ms: float) -> str:
    """Return "bad", "warning" or "good" for an average latency."""
    if avg_latency_ms > LATENCY_BAD_MS:
        return "bad"
    if avg_latency_ms > LATENCY_WARNING_MS:
        return "warning"
    return "good"


def error_rate_class(error_rate: float) -> str:
    """Return "bad", "warning" or "good" for an error rate fraction."""
    if error_rate > ERROR_RATE_BAD:
        return "bad"
    if error_rate > ERROR_RATE_WARNING:
        return "warning"
    return "good"


def health_class(health: Optional[NodeHealth]) -> str:
    return (health or NodeHealth.HEALTHY).value.lower()


def node_color(health: Optional[NodeHealth]) -> str:
    return PALETTE[NODE_COLOR_KEYS.get(health, "ok")]


def node_icon(node_type: Optional[NodeType]) -> str:
    return NODE_ICONS.get(node_type, DEFAULT_NODE_ICON)


# ------------------------------------------------------------------ #
# Edge classification
# ------------------------------------------------------------------ #

def edge_category(status: Optional[EdgeStatus]) -> str:
    """Return "failing", "slow" or "" (no special class)."""
    if status in (EdgeStatus.FAILING, EdgeStatus.TIMEOUT):
        return "failing"
    if status == EdgeStatus.SLOW:
        return "slow"
    return ""


def edge_color(status: Optional[EdgeStatus]) -> str:
    return PALETTE[EDGE_COLOR_KEYS.get(status, "ok")]


def is_edge_animated(status: Optional[EdgeStatus]) -> bool:
    """Slow and failing calls are drawn with a continuous animation."""
    return status in _ANIMATED_STATUSES


def edge_error_color(error_rate: float) -> Optional[str]:
    """Color of the edge error badge; None when there are no errors."""
    if error_rate <= 0:
        return None
    return PALETTE["failing"] if error_rate > ERROR_RATE_BAD else PALETTE["warning"]


# ------------------------------------------------------------------ #
# Formatting
# ------------------------------------------------------------------ #

def format_latency(ms: float) -> str:
    """Integer milliseconds below one second, else seconds with one decimal."""
    if ms < 1000:
        return f"{int(ms)}ms"
    return f"{ms / 1000:.1f}s"


def format_error_rate(error_rate: float) -> str:
    return f"{error_rate * 100:.1f}%"
