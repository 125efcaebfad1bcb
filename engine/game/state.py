"""Game phases, immutable game state, and the phase state machine."""

from dataclasses import dataclass, field, replace
from enum import Enum, auto

from transitions import Machine

from engine.audit import AuditEntry, AuditKind, AuditLog, Snapshot
from engine.cards import Card, hand_total


class Phase(Enum):
    """
    Game phases.

    Flow: LOBBY → PLAYER → DEALER → DONE → LOBBY
    """

    # Betting, no cards dealt
    LOBBY = auto()

    # Player draws or stands
    PLAYER = auto()

    # Dealer plays out its hand
    DEALER = auto()

    # Hand resolved, waiting for the next one
    DONE = auto()

    def __str__(self) -> str:
        return self.name


# Internal transitions (dest None) keep the phase but are only legal from
# their source phases.
PHASE_TRANSITIONS = [
    {"trigger": "reset_run", "source": "*", "dest": "lobby"},
    {"trigger": "shuffle", "source": "*", "dest": None},
    {"trigger": "adjust_bet", "source": "lobby", "dest": None},
    {"trigger": "start", "source": "lobby", "dest": "player"},
    {"trigger": "draw", "source": "player", "dest": None},
    {"trigger": "bust", "source": "player", "dest": "done"},
    {"trigger": "stand", "source": "player", "dest": "dealer"},
    {"trigger": "resolve", "source": "dealer", "dest": "done"},
    {"trigger": "next_hand", "source": "done", "dest": "lobby"},
]


PHASE_STATES = [p.name.lower() for p in Phase]

# Shared by every cursor; models are attached only for one transition.
PHASE_MACHINE = Machine(
    model=None,
    states=PHASE_STATES,
    transitions=PHASE_TRANSITIONS,
    initial=PHASE_STATES[0],
    auto_transitions=False,
    model_attribute="_machine_state",
)


class PhaseCursor:
    """
    Tracks the phase of a single transition.

    Attaches itself to the shared ``transitions`` machine on entry and
    detaches on exit, so phase legality lives in one declared table instead
    of scattered checks::

        with PhaseCursor(state.phase) as cursor:
            if cursor.allows("start"):
                phase = cursor.fire("start")
    """

    def __init__(self, phase: Phase) -> None:
        self._initial = phase.name.lower()
        self.machine = PHASE_MACHINE

    def __enter__(self) -> "PhaseCursor":
        self.machine.add_model(self, initial=self._initial)
        return self

    def __exit__(self, *exc_info) -> None:
        self.machine.remove_model(self)

    @property
    def phase(self) -> Phase:
        """Get the current phase as enum."""
        return Phase[self._machine_state.upper()]  # type: ignore[attr-defined]

    def allows(self, trigger: str) -> bool:
        """Check if a trigger is legal from the current phase."""
        return trigger in self.machine.get_triggers(self._machine_state)  # type: ignore[attr-defined]

    def fire(self, trigger: str) -> Phase:
        """Fire a trigger and return the resulting phase."""
        self.trigger(trigger)  # type: ignore[attr-defined]
        return self.phase


def phase_allows(phase: Phase, trigger: str) -> bool:
    """Check if a trigger is legal from a phase."""
    return trigger in PHASE_MACHINE.get_triggers(phase.name.lower())


@dataclass(frozen=True)
class GameState:
    """
    Immutable game state.

    Attributes:
        seed: Cosmetic 32-bit value shown in the audit trail
        phase: Current phase
        deck: Remaining cards, front is drawn next
        player_hand: Player cards in draw order
        dealer_hand: Dealer cards in draw order (up-card first)
        bankroll: Player bankroll in sats
        bet: Current bet
        message: User-facing status line
        player_initial_bust: Whether the first two player cards busted
        log: Bounded audit trail
    """

    seed: int
    deck: tuple[Card, ...]
    phase: Phase = Phase.LOBBY
    player_hand: tuple[Card, ...] = ()
    dealer_hand: tuple[Card, ...] = ()
    bankroll: int = 10000
    bet: int = 0
    message: str = ""
    player_initial_bust: bool = False
    log: AuditLog = field(default_factory=AuditLog)

    @property
    def player_total(self) -> float:
        return hand_total(self.player_hand)

    @property
    def dealer_total(self) -> float:
        return hand_total(self.dealer_hand)

    @property
    def in_play(self) -> frozenset[str]:
        """Return the ids of every card held in either hand."""
        return frozenset(c.id for c in (*self.player_hand, *self.dealer_hand))

    def record(self, kind: AuditKind, note: str, timestamp: int) -> "GameState":
        """Return this state with an audit entry describing it appended."""
        entry = AuditEntry(
            timestamp=timestamp,
            kind=kind,
            note=note,
            snapshot=Snapshot.of(self),
        )
        return replace(self, log=self.log.append(entry))
