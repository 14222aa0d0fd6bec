"""
Error Taxonomy

Explicit error codes for the flow view engine.

PROPAGATION POLICY:
===================
- I/O failures are raised at the fetch boundary and caught by the controller
- Layout and classifier failures are programming errors and are never caught
- A graph without roots is NOT an error (first-node fallback)
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Optional


class ErrorCode(Enum):
    """
    Explicit error codes.
    Every failure the controller converts into state is enumerated here.
    """
    MALFORMED_PAYLOAD = auto()
    MALFORMED_GRAPH = auto()
    FLOW_NOT_FOUND = auto()
    TRANSIENT_FETCH_FAILURE = auto()


class FlowViewError(Exception):
    """Base error carrying an explicit error code."""

    code: ErrorCode = ErrorCode.TRANSIENT_FETCH_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedPayloadError(FlowViewError):
    """Raw API record is missing required fields or has the wrong shape."""

    code = ErrorCode.MALFORMED_PAYLOAD


class MalformedGraphError(MalformedPayloadError):
    """Raw graph payload is missing its node/edge arrays or is inconsistent."""

    code = ErrorCode.MALFORMED_GRAPH


class FlowNotFoundError(FlowViewError):
    """The requested trace id has no corresponding flow."""

    code = ErrorCode.FLOW_NOT_FOUND

    def __init__(self, trace_id: str):
        super().__init__(f"Flow not found: {trace_id}")
        self.trace_id = trace_id


class TransientFetchError(FlowViewError):
    """Network or backend failure on any list, stats or explanation fetch."""

    code = ErrorCode.TRANSIENT_FETCH_FAILURE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
