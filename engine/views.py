"""Read-only views of a game state: summary and export payload."""

import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from engine.audit import AuditLog
from engine.cards import card_ids
from engine.game.state import GameState, Phase

EXPORT_VERSION = "p77-beta"


@dataclass(frozen=True)
class TableSummary:
    """Derived, read-only summary for rendering or debugging."""

    seed: int
    phase: Phase
    player_total: float
    dealer_total: float
    deck_count: int
    bankroll: int
    bet: int
    player_hand: tuple[str, ...]
    dealer_hand: tuple[str, ...]
    player_initial_bust: bool
    message: str
    log: AuditLog

    @property
    def can_bet(self) -> bool:
        return self.phase is Phase.LOBBY

    @property
    def can_start(self) -> bool:
        return self.phase is Phase.LOBBY and 0 < self.bet <= self.bankroll

    @property
    def can_draw(self) -> bool:
        """Drawing is allowed on the player's turn unless the deal busted."""
        return self.phase is Phase.PLAYER and not self.player_initial_bust

    @property
    def can_stand(self) -> bool:
        return self.phase is Phase.PLAYER

    @property
    def can_next_hand(self) -> bool:
        return self.phase is Phase.DONE


def summarize(state: GameState) -> TableSummary:
    """Build the summary view of a state."""
    return TableSummary(
        seed=state.seed,
        phase=state.phase,
        player_total=state.player_total,
        dealer_total=state.dealer_total,
        deck_count=len(state.deck),
        bankroll=state.bankroll,
        bet=state.bet,
        player_hand=tuple(card_ids(state.player_hand)),
        dealer_hand=tuple(card_ids(state.dealer_hand)),
        player_initial_bust=state.player_initial_bust,
        message=state.message,
        log=state.log,
    )


def export_run(
    state: GameState,
    clock: Callable[[], float] | None = None,
) -> dict[str, Any]:
    """
    Build the JSON-serializable debug payload for a run.

    Args:
        state: State to export
        clock: Epoch-seconds source for ``createdAt`` (defaults to wall clock)

    Returns:
        Dict with ``version``, ``createdAt``, ``state`` and ``log``
    """
    now = (clock or time.time)()
    created_at = datetime.fromtimestamp(now, tz=timezone.utc)
    return {
        "version": EXPORT_VERSION,
        "createdAt": created_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "state": {
            "seed": state.seed,
            "phase": state.phase.name,
            "deckCount": len(state.deck),
            "bankroll": state.bankroll,
            "bet": state.bet,
            "playerHand": [card.to_dict() for card in state.player_hand],
            "dealerHand": [card.to_dict() for card in state.dealer_hand],
            "playerInitialBust": state.player_initial_bust,
            "message": state.message,
        },
        "log": state.log.to_list(),
    }


def export_run_json(state: GameState, clock: Callable[[], float] | None = None) -> str:
    """Export a run as indented JSON text."""
    return json.dumps(export_run(state, clock), indent=2)
