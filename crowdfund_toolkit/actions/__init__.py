"""Donate/deactivate action workflow."""

from .coordinator import ActionCoordinator
from .state import ActionKind, ActionState

__all__ = ["ActionCoordinator", "ActionKind", "ActionState"]
