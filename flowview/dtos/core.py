"""
Core DTO Types

Foundational enums and version types for all flow DTOs.

VERSIONING REQUIREMENT:
=======================
Top-level DTOs include a version field.
Consumers MUST fail fast on unknown versions.
"""

from __future__ import annotations
from enum import Enum
from typing import Final


# =============================================================================
# VERSION CONSTANTS
# =============================================================================

class DTOVersion(Enum):
    """
    DTO schema versions.

    Renderers MUST reject unknown versions.
    """
    V1 = "v1"

    @classmethod
    def current(cls) -> 'DTOVersion':
        return cls.V1


CURRENT_DTO_VERSION: Final[DTOVersion] = DTOVersion.V1


# =============================================================================
# AVAILABILITY STATES (Explicit Absence)
# =============================================================================

class AvailabilityState(Enum):
    """
    Availability of a piece of data.

    Missing data MUST be flagged, never guessed.
    """
    PRESENT = "present"   # Data is available
    LOADING = "loading"   # Fetch in flight
    MISSING = "missing"   # Requested but not found or failed
    UNKNOWN = "unknown"   # Nothing requested yet


# =============================================================================
# NODE CLASSIFICATION (Backend-Owned)
# =============================================================================

class NodeType(Enum):
    """Role of a service node in the call flow."""
    ENTRY = "ENTRY"
    INTERNAL = "INTERNAL"
    DATABASE = "DATABASE"
    EXTERNAL = "EXTERNAL"
    MESSAGING = "MESSAGING"
    CACHE = "CACHE"
    UNSPECIFIED = "UNSPECIFIED"


class NodeHealth(Enum):
    """
    Node health as reported by the tracing backend.

    An unspecified health is treated as HEALTHY.
    """
    HEALTHY = "HEALTHY"
    DEGRADED = "DEGRADED"
    FAILING = "FAILING"


# =============================================================================
# EDGE AND FLOW STATUS (Backend-Owned)
# =============================================================================

class EdgeStatus(Enum):
    """Call status between two nodes."""
    NORMAL = "NORMAL"
    SLOW = "SLOW"
    FAILING = "FAILING"
    TIMEOUT = "TIMEOUT"
    RETRYING = "RETRYING"


class FlowStatus(Enum):
    """Outcome of a whole trace."""
    SUCCESS = "SUCCESS"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"
    FAILURE = "FAILURE"
    TIMEOUT = "TIMEOUT"
