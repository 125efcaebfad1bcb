"""Actions accepted by the game state machine."""

from dataclasses import dataclass
from enum import Enum, auto

DRAW_COUNTS = (1, 2)


class ActionType(Enum):
    """Types of game actions."""

    RESET_RUN = auto()
    SHUFFLE = auto()
    BET_ADD = auto()
    RESET_BET = auto()
    BET_PLACE_CTA = auto()
    START = auto()
    DRAW = auto()
    STAND = auto()
    DEALER_PLAY = auto()
    NEXT_HAND = auto()

    @property
    def trigger(self) -> str:
        """Return the phase-machine trigger that gates this action."""
        return _TRIGGERS[self]


_TRIGGERS = {
    ActionType.RESET_RUN: "reset_run",
    ActionType.SHUFFLE: "shuffle",
    ActionType.BET_ADD: "adjust_bet",
    ActionType.RESET_BET: "adjust_bet",
    ActionType.BET_PLACE_CTA: "adjust_bet",
    ActionType.START: "start",
    ActionType.DRAW: "draw",
    ActionType.STAND: "stand",
    ActionType.DEALER_PLAY: "resolve",
    ActionType.NEXT_HAND: "next_hand",
}


@dataclass(frozen=True)
class Action:
    """
    Immutable game action.

    ``amount`` is the bet increment for BET_ADD and the card count for DRAW;
    other actions ignore it.
    """

    type: ActionType
    amount: int = 0

    def __post_init__(self) -> None:
        if self.type is ActionType.DRAW and self.amount not in DRAW_COUNTS:
            raise ValueError(f"Can only draw {DRAW_COUNTS} cards, got {self.amount}")

    def __str__(self) -> str:
        if self.type in (ActionType.BET_ADD, ActionType.DRAW):
            return f"{self.type.name}({self.amount})"
        return self.type.name

    @classmethod
    def reset_run(cls) -> "Action":
        return cls(ActionType.RESET_RUN)

    @classmethod
    def shuffle(cls) -> "Action":
        return cls(ActionType.SHUFFLE)

    @classmethod
    def bet_add(cls, inc: int) -> "Action":
        return cls(ActionType.BET_ADD, inc)

    @classmethod
    def reset_bet(cls) -> "Action":
        return cls(ActionType.RESET_BET)

    @classmethod
    def bet_place_cta(cls) -> "Action":
        return cls(ActionType.BET_PLACE_CTA)

    @classmethod
    def start(cls) -> "Action":
        return cls(ActionType.START)

    @classmethod
    def draw(cls, n: int = 1) -> "Action":
        return cls(ActionType.DRAW, n)

    @classmethod
    def stand(cls) -> "Action":
        return cls(ActionType.STAND)

    @classmethod
    def dealer_play(cls) -> "Action":
        return cls(ActionType.DEALER_PLAY)

    @classmethod
    def next_hand(cls) -> "Action":
        return cls(ActionType.NEXT_HAND)

    @classmethod
    def parse(cls, name: str, amount: int | None = None) -> "Action":
        """
        Build an action from its wire name, e.g. ``("BET_ADD", 10)``.

        Raises:
            ValueError: If the name is unknown or the amount is invalid
        """
        try:
            action_type = ActionType[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown action: {name}") from None

        if action_type is ActionType.DRAW:
            return cls(action_type, 1 if amount is None else amount)
        if action_type is ActionType.BET_ADD:
            if amount is None:
                raise ValueError("BET_ADD requires an amount")
            return cls(action_type, amount)
        return cls(action_type)
