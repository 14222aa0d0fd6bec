"""
Interaction Layer

Action contracts, the pure reducer and the controller that drives them.
"""

from .actions import Action, ActionType
from .reducer import reduce
from .controller import FlowExplorerController

__all__ = ['Action', 'ActionType', 'reduce', 'FlowExplorerController']
