"""
Flow View Configuration

Defaults mirror the tracing dashboard; every value can be overridden
from the environment.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
import os


DEFAULT_API_BASE = "http://localhost:8080/api"
DEFAULT_TRACE_LIMIT = 50
DEFAULT_TIME_RANGE = "1h"

# Time range selector -> lookback window in milliseconds
TIME_RANGE_TO_MS: Dict[str, int] = {
    "15m": 15 * 60 * 1000,
    "1h": 60 * 60 * 1000,
    "6h": 6 * 60 * 60 * 1000,
    "24h": 24 * 60 * 60 * 1000,
}


@dataclass(frozen=True)
class FlowViewConfig:
    """Unified configuration for the flow view engine."""
    api_base_url: str = DEFAULT_API_BASE
    trace_limit: int = DEFAULT_TRACE_LIMIT
    default_time_range: str = DEFAULT_TIME_RANGE
    # None keeps the HTTP client's own default timeout
    request_timeout: Optional[float] = None
    time_ranges: Mapping[str, int] = field(default_factory=lambda: dict(TIME_RANGE_TO_MS))

    def __post_init__(self):
        if self.default_time_range not in self.time_ranges:
            raise ValueError(f"Unknown time range: {self.default_time_range}")
        if self.trace_limit <= 0:
            raise ValueError(f"trace_limit must be positive, got {self.trace_limit}")

    def lookback_ms(self, time_range: Optional[str] = None) -> int:
        """Resolve a time range selector to a lookback window."""
        key = time_range or self.default_time_range
        try:
            return self.time_ranges[key]
        except KeyError:
            raise ValueError(f"Unknown time range: {key}") from None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FlowViewConfig":
        """Build config from FLOWVIEW_* environment variables."""
        env = os.environ if environ is None else environ

        timeout = env.get("FLOWVIEW_TIMEOUT")
        return cls(
            api_base_url=env.get("FLOWVIEW_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            trace_limit=int(env.get("FLOWVIEW_TRACE_LIMIT", DEFAULT_TRACE_LIMIT)),
            default_time_range=env.get("FLOWVIEW_TIME_RANGE", DEFAULT_TIME_RANGE),
            request_timeout=float(timeout) if timeout else None,
        )
