"""Append-only, capacity-bounded audit trail of game transitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, overload

from engine.cards import card_ids, hand_total

if TYPE_CHECKING:
    from engine.game.state import GameState

DEFAULT_CAPACITY = 200


class AuditKind(str, Enum):
    """Tags for audit entries."""

    # Run and deck management
    RESET_RUN = "RESET_RUN"
    SHUFFLE = "SHUFFLE"

    # Betting
    RESET_BET = "RESET_BET"
    BET_ADD = "BET_ADD"
    BET_PLACE_CTA = "BET_PLACE_CTA"

    # Dealing and player actions
    START = "START"
    START_BLOCKED = "START_BLOCKED"
    DRAW = "DRAW"
    DRAW_BLOCKED = "DRAW_BLOCKED"
    BUST_BY_HIT = "BUST_BY_HIT"
    STAND = "STAND"

    # Resolution
    DEALT_BUST_WIN = "DEALT_BUST_WIN"
    DEALT_BUST_LOSS = "DEALT_BUST_LOSS"
    DEALER_BUST_WIN = "DEALER_BUST_WIN"
    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"

    NEXT_HAND = "NEXT_HAND"

    def __str__(self) -> str:
        return self.value

    @property
    def is_blocked(self) -> bool:
        """Check if this tag records a rejected transition."""
        return self.value.endswith("_BLOCKED")


@dataclass(frozen=True)
class Snapshot:
    """Read-only summary of a game state at one point in time."""

    seed: int
    phase: str
    deck: int
    bankroll: int
    bet: int
    player_total: float
    dealer_total: float
    player_hand: tuple[str, ...]
    dealer_hand: tuple[str, ...]

    @classmethod
    def of(cls, state: GameState) -> Snapshot:
        """Take a snapshot of a game state."""
        return cls(
            seed=state.seed,
            phase=state.phase.name,
            deck=len(state.deck),
            bankroll=state.bankroll,
            bet=state.bet,
            player_total=hand_total(state.player_hand),
            dealer_total=hand_total(state.dealer_hand),
            player_hand=tuple(card_ids(state.player_hand)),
            dealer_hand=tuple(card_ids(state.dealer_hand)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "phase": self.phase,
            "deck": self.deck,
            "bankroll": self.bankroll,
            "bet": self.bet,
            "playerTotal": self.player_total,
            "dealerTotal": self.dealer_total,
            "playerHand": list(self.player_hand),
            "dealerHand": list(self.dealer_hand),
        }


@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable record of one transition.

    Attributes:
        timestamp: Epoch milliseconds when the entry was recorded
        kind: Tag describing the transition
        note: Human-readable description
        snapshot: Summary of the resulting state
    """

    timestamp: int
    kind: AuditKind
    note: str
    snapshot: Snapshot

    def __str__(self) -> str:
        return f"{self.kind}: {self.note}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "at": self.timestamp,
            "kind": self.kind.value,
            "note": self.note,
            "snapshot": self.snapshot.to_dict(),
        }


@dataclass(frozen=True)
class AuditLog:
    """
    Bounded audit log.

    Appending returns a new log; once ``capacity`` is exceeded the oldest
    entries are dropped from the front.
    """

    entries: tuple[AuditEntry, ...] = ()
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("Audit log capacity must be at least 1")
        if len(self.entries) > self.capacity:
            object.__setattr__(self, "entries", self.entries[-self.capacity:])

    def append(self, entry: AuditEntry) -> AuditLog:
        """Return a new log with the entry appended."""
        entries = (*self.entries, entry)
        if len(entries) > self.capacity:
            entries = entries[len(entries) - self.capacity:]
        return AuditLog(entries=entries, capacity=self.capacity)

    @property
    def last(self) -> AuditEntry | None:
        """Return the most recent entry, if any."""
        return self.entries[-1] if self.entries else None

    def kinds(self) -> list[AuditKind]:
        return [entry.kind for entry in self.entries]

    def to_list(self) -> list[dict[str, Any]]:
        """Serialize every entry, oldest first."""
        return [entry.to_dict() for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(self.entries)

    @overload
    def __getitem__(self, index: int) -> AuditEntry: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[AuditEntry, ...]: ...

    def __getitem__(self, index):
        return self.entries[index]
