"""
Flow View Engine

Turns a distributed trace's call graph into a deterministic, classified
and positioned view, and drives the explorer state around it.

LAYERS:
=======
dtos          -> immutable contracts
mapper        -> payload normalization (single conversion boundary)
visualization -> status classification + hierarchical layout
analysis      -> structural metrics (NetworkX)
state         -> explorer selection state
interaction   -> actions, reducer, async controller
presentation  -> view models for list and detail panels
"""

__version__ = "0.1.0"
