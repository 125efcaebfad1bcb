"""Deck and hand integrity: repair-or-validate and guaranteed-unique draws."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable

from engine.cards import CANONICAL_IDS, Card, build_deck
from engine.shuffle import Shuffler

if TYPE_CHECKING:
    from engine.game.state import GameState

logger = logging.getLogger(__name__)

DRAW_RETRY_LIMIT = 500


class CardUniverseExhausted(IndexError):
    """Raised when every canonical card is blocked and a draw cannot complete."""


def has_duplicate_ids(cards: Iterable[Card]) -> bool:
    """Check if any card id appears more than once."""
    seen: set[str] = set()
    for card in cards:
        if card.id in seen:
            return True
        seen.add(card.id)
    return False


def in_play_ids(*hands: Iterable[Card]) -> set[str]:
    """Collect the ids of every card in the given hands."""
    return {card.id for hand in hands for card in hand}


def dedupe(cards: Iterable[Card], blocked: Iterable[str] = ()) -> tuple[Card, ...]:
    """Drop repeated ids (keeping the first) and any id in ``blocked``."""
    seen = set(blocked)
    kept = []
    for card in cards:
        if card.id in seen:
            continue
        seen.add(card.id)
        kept.append(card)
    return tuple(kept)


def rebuild_deck(blocked: Iterable[str], shuffler: Shuffler) -> tuple[Card, ...]:
    """Shuffle the canonical set minus the blocked ids."""
    excluded = set(blocked)
    return shuffler.shuffle(c for c in build_deck() if c.id not in excluded)


def deck_is_valid(deck: tuple[Card, ...], in_play: set[str]) -> bool:
    """
    Check the deck against the hands.

    Valid means no duplicate ids, no overlap with a hand, and together with
    the hands the deck covers the whole canonical universe.
    """
    if has_duplicate_ids(deck):
        return False
    deck_ids = {card.id for card in deck}
    if deck_ids & in_play:
        return False
    return deck_ids | in_play == CANONICAL_IDS


def normalize(state: GameState, shuffler: Shuffler) -> GameState:
    """
    Repair hand and deck invariants.

    Each hand is deduplicated by id, keeping the first occurrence; the dealer
    hand also gives up any id the player already holds. If the deck is then
    invalid it is rebuilt from the canonical set minus the in-play ids.

    Returns the same object when nothing needed repair, so applying it twice
    is a no-op.
    """
    player = dedupe(state.player_hand)
    dealer = dedupe(state.dealer_hand, blocked=(c.id for c in player))
    in_play = in_play_ids(player, dealer)

    hands_ok = player == state.player_hand and dealer == state.dealer_hand
    deck_ok = deck_is_valid(state.deck, in_play)
    if hands_ok and deck_ok:
        return state

    if not hands_ok:
        logger.warning(
            "Dropped duplicate hand cards (player %d -> %d, dealer %d -> %d)",
            len(state.player_hand),
            len(player),
            len(state.dealer_hand),
            len(dealer),
        )
    deck = state.deck
    if not deck_ok:
        deck = rebuild_deck(in_play, shuffler)
        logger.warning("Rebuilt corrupted deck: %d cards", len(deck))

    return replace(state, player_hand=player, dealer_hand=dealer, deck=deck)


def take_unique(
    deck: tuple[Card, ...],
    n: int,
    in_play: Iterable[str],
    shuffler: Shuffler,
    retry_limit: int = DRAW_RETRY_LIMIT,
) -> tuple[tuple[Card, ...], tuple[Card, ...]]:
    """
    Draw exactly ``n`` cards distinct from each other and from ``in_play``.

    Cards come off the front of the deck. A blocked card is skipped and not
    returned to the deck. After ``retry_limit`` consecutive unproductive
    attempts, or when the deck runs dry, the deck is regenerated from the
    canonical set minus every blocked id.

    Args:
        deck: Cards to draw from, front first
        n: Number of cards to draw
        in_play: Ids that may not be drawn
        shuffler: Source for regenerated decks
        retry_limit: Consecutive skips tolerated before regenerating

    Returns:
        The drawn cards and the remaining deck

    Raises:
        CardUniverseExhausted: If every canonical id is blocked
    """
    blocked = set(in_play)
    remaining = list(deck)
    if has_duplicate_ids(remaining):
        logger.warning("Deck has duplicate ids before draw, rebuilding")
        remaining = list(rebuild_deck(blocked, shuffler))

    drawn: list[Card] = []
    misses = 0
    while len(drawn) < n:
        if misses > retry_limit or not remaining:
            logger.warning(
                "Regenerating deck mid-draw (misses=%d, remaining=%d)",
                misses,
                len(remaining),
            )
            remaining = list(rebuild_deck(blocked, shuffler))
            misses = 0
            if not remaining:
                raise CardUniverseExhausted(
                    f"No drawable cards left: {len(blocked)} ids blocked"
                )

        card = remaining.pop(0)
        if card.id in blocked:
            misses += 1
            continue

        drawn.append(card)
        blocked.add(card.id)
        misses = 0

    return tuple(drawn), tuple(remaining)
