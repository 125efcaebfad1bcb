"""Game state machine and session host."""

from engine.game.state import GameState, Phase
from engine.game.actions import Action, ActionType
from engine.game.engine import TableEngine, initial_state, reduce
from engine.game.session import TableSession

__all__ = [
    "GameState",
    "Phase",
    "Action",
    "ActionType",
    "TableEngine",
    "initial_state",
    "reduce",
    "TableSession",
]
