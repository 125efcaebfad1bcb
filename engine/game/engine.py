"""Game engine: the pure transition function and the dealer."""

import logging
import time
from dataclasses import replace
from random import Random
from typing import Callable

from engine.audit import AuditKind, AuditLog
from engine.cards import build_deck, hand_total
from engine.game.actions import Action, ActionType
from engine.game.state import GameState, Phase, PhaseCursor
from engine.integrity import in_play_ids, normalize, rebuild_deck, take_unique
from engine.rules import TableRules
from engine.shuffle import Shuffler

logger = logging.getLogger(__name__)

LOBBY_MESSAGE = "Place a bet to join the table."
BET_SET_MESSAGE = "Bet set. Press START to deal."
TURN_MESSAGE = "Your turn. Draw 2, Draw 1, or Stand."
DEALT_BUST_MESSAGE = "Dealt bust. Only STAND is allowed."
DEALER_MESSAGE = "Dealer plays..."

# Outcome -> (bankroll direction, message, audit note)
SETTLEMENTS: dict[AuditKind, tuple[int, str, str]] = {
    AuditKind.DEALT_BUST_WIN: (
        1,
        "Dealer busts ({dt:.2f}). You win. (+{bet} sats)",
        "Dealt-bust exception win (dealer bust {dt:.2f}). +{bet}.",
    ),
    AuditKind.DEALT_BUST_LOSS: (
        -1,
        "You were dealt bust ({pt:.2f}). Dealer stands ({dt:.2f}). You lose. (-{bet} sats)",
        "Dealt-bust loss (dealer {dt:.2f}). -{bet}.",
    ),
    AuditKind.DEALER_BUST_WIN: (
        1,
        "Dealer busts ({dt:.2f}). You win. (+{bet} sats)",
        "Dealer bust {dt:.2f}. +{bet}.",
    ),
    AuditKind.WIN: (
        1,
        "You win. (P {pt:.2f} vs D {dt:.2f}) (+{bet} sats)",
        "Win P {pt:.2f} vs D {dt:.2f}. +{bet}.",
    ),
    AuditKind.LOSS: (
        -1,
        "You lose. (P {pt:.2f} vs D {dt:.2f}) (-{bet} sats)",
        "Loss P {pt:.2f} vs D {dt:.2f}. -{bet}.",
    ),
    AuditKind.PUSH: (
        0,
        "Push. (P {pt:.2f} vs D {dt:.2f}) (+0 sats)",
        "Push P {pt:.2f} vs D {dt:.2f}.",
    ),
}


def settle(
    player_total: float,
    dealer_total: float,
    player_initial_bust: bool,
    rules: TableRules,
) -> AuditKind:
    """
    Decide the outcome of a hand.

    A dealt bust only wins if the dealer busts; the player's total is never
    compared in that case.

    Returns:
        One of the resolution tags in ``SETTLEMENTS``
    """
    dealer_bust = rules.is_bust(dealer_total)
    if player_initial_bust:
        return AuditKind.DEALT_BUST_WIN if dealer_bust else AuditKind.DEALT_BUST_LOSS
    if dealer_bust:
        return AuditKind.DEALER_BUST_WIN
    if player_total > dealer_total:
        return AuditKind.WIN
    if player_total < dealer_total:
        return AuditKind.LOSS
    return AuditKind.PUSH


class TableEngine:
    """
    Card table engine.

    Holds the rules, random source and clock; every transition is a pure
    function of the incoming state and action. The engine never keeps game
    state itself.
    """

    def __init__(
        self,
        rules: TableRules | None = None,
        rng: Random | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator, OS CSPRNG if not provided
            clock: Wall-clock source in epoch seconds for audit timestamps
        """
        self.rules = rules or TableRules()
        self.shuffler = Shuffler(rng)
        self._clock = clock or time.time
        self._handlers: dict[ActionType, Callable[[GameState, Action, PhaseCursor], GameState]] = {
            ActionType.RESET_RUN: self._reset_run,
            ActionType.SHUFFLE: self._shuffle,
            ActionType.BET_ADD: self._bet_add,
            ActionType.RESET_BET: self._reset_bet,
            ActionType.BET_PLACE_CTA: self._bet_place_cta,
            ActionType.START: self._start,
            ActionType.DRAW: self._draw,
            ActionType.STAND: self._stand,
            ActionType.DEALER_PLAY: self._dealer_play,
            ActionType.NEXT_HAND: self._next_hand,
        }

    def now(self) -> int:
        """Return the current time in epoch milliseconds."""
        return int(self._clock() * 1000)

    def initial_state(self) -> GameState:
        """Create a fresh run: new seed, shuffled deck, full bankroll."""
        return GameState(
            seed=self.shuffler.new_seed(),
            deck=self.shuffler.shuffle(build_deck()),
            phase=Phase.LOBBY,
            bankroll=self.rules.starting_bankroll,
            message=LOBBY_MESSAGE,
            log=AuditLog(capacity=self.rules.log_capacity),
        )

    def reduce(self, state: GameState, action: Action) -> GameState:
        """
        Apply one action and return the next state.

        The incoming state is repaired first. Actions that are illegal in the
        current phase return it unchanged.
        """
        state = normalize(state, self.shuffler)
        with PhaseCursor(state.phase) as cursor:
            if not cursor.allows(action.type.trigger):
                logger.debug("Ignored %s in phase %s", action, state.phase)
                return state

            next_state = self._handlers[action.type](state, action, cursor)
        logger.debug(
            "%s: %s -> %s (bankroll %d, bet %d)",
            action,
            state.phase,
            next_state.phase,
            next_state.bankroll,
            next_state.bet,
        )
        return next_state

    def _record(self, state: GameState, kind: AuditKind, note: str) -> GameState:
        return state.record(kind, note, self.now())

    def _reset_run(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        fresh = replace(self.initial_state(), phase=cursor.fire("reset_run"))
        return self._record(fresh, AuditKind.RESET_RUN, "Reset run.")

    def _shuffle(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        if state.phase is Phase.PLAYER:
            message = DEALT_BUST_MESSAGE if state.player_initial_bust else TURN_MESSAGE
        elif state.phase is Phase.LOBBY:
            message = LOBBY_MESSAGE
        else:
            message = state.message

        cursor.fire("shuffle")
        next_state = replace(
            state,
            seed=self.shuffler.new_seed(),
            deck=rebuild_deck(state.in_play, self.shuffler),
            message=message,
        )
        return self._record(next_state, AuditKind.SHUFFLE, "Shuffled deck (excluding in-play).")

    def _bet_add(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        bet = self.rules.clamp_bet(state.bet + action.amount)
        cursor.fire("adjust_bet")
        next_state = replace(
            state,
            bet=bet,
            message=BET_SET_MESSAGE if bet > 0 else LOBBY_MESSAGE,
        )
        return self._record(next_state, AuditKind.BET_ADD, f"Bet {action.amount:+d} -> {bet}.")

    def _reset_bet(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        cursor.fire("adjust_bet")
        next_state = replace(state, bet=0, message=LOBBY_MESSAGE)
        return self._record(next_state, AuditKind.RESET_BET, "Reset bet to 0.")

    def _bet_place_cta(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        bet = state.bet if state.bet > 0 else self.rules.cta_bet
        cursor.fire("adjust_bet")
        next_state = replace(state, bet=bet, message=BET_SET_MESSAGE)
        return self._record(next_state, AuditKind.BET_PLACE_CTA, f"CTA placed bet -> {bet}.")

    def _start(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        if state.bet <= 0:
            blocked = replace(state, message="You must place a bet first.")
            return self._record(blocked, AuditKind.START_BLOCKED, "Start blocked: no bet.")
        if state.bet > state.bankroll:
            blocked = replace(state, message="Bet exceeds bankroll.")
            return self._record(blocked, AuditKind.START_BLOCKED, "Start blocked: bet > bankroll.")

        # Hands are empty in the lobby; anything left over goes back under the deck.
        deck = (*state.deck, *state.player_hand, *state.dealer_hand)
        taken, rest = take_unique(
            deck, 4, (), self.shuffler, retry_limit=self.rules.draw_retry_limit
        )
        player = (taken[0], taken[2])
        dealer = (taken[1], taken[3])

        total = hand_total(player)
        initial_bust = self.rules.is_bust(total)
        next_state = replace(
            state,
            phase=cursor.fire("start"),
            deck=rest,
            player_hand=player,
            dealer_hand=dealer,
            player_initial_bust=initial_bust,
            message=DEALT_BUST_MESSAGE if initial_bust else TURN_MESSAGE,
        )
        note = f"Dealt. Player {total:.2f}{' (dealt bust)' if initial_bust else ''}."
        return self._record(next_state, AuditKind.START, note)

    def _draw(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        if state.player_initial_bust:
            blocked = replace(state, message=DEALT_BUST_MESSAGE)
            return self._record(blocked, AuditKind.DRAW_BLOCKED, "Draw blocked: dealt bust.")
        # A hand already over the threshold has been settled; never charge it twice.
        if self.rules.is_bust(state.player_total):
            logger.debug("Ignored %s on a hand already at %.2f", action, state.player_total)
            return state

        taken, rest = take_unique(
            state.deck,
            action.amount,
            state.in_play,
            self.shuffler,
            retry_limit=self.rules.draw_retry_limit,
        )
        hand = (*state.player_hand, *taken)
        total = hand_total(hand)

        if self.rules.is_bust(total):
            next_state = replace(
                state,
                phase=cursor.fire("bust"),
                deck=rest,
                player_hand=hand,
                bankroll=state.bankroll - state.bet,
                message=f"You bust ({total:.2f}). You lose. (-{state.bet} sats)",
            )
            note = f"Player bust by hit at {total:.2f} (-{state.bet})."
            return self._record(next_state, AuditKind.BUST_BY_HIT, note)

        cursor.fire("draw")
        next_state = replace(state, deck=rest, player_hand=hand, message=TURN_MESSAGE)
        note = f"Player drew {action.amount}. Total now {total:.2f}."
        return self._record(next_state, AuditKind.DRAW, note)

    def _stand(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        standing = replace(state, phase=cursor.fire("stand"), message=DEALER_MESSAGE)
        standing = self._record(standing, AuditKind.STAND, "Player stands. Dealer phase.")
        # Entering the dealer phase resolves the hand in the same transition.
        return self._play_dealer(standing, cursor)

    def _dealer_play(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        return self._play_dealer(state, cursor)

    def _play_dealer(self, state: GameState, cursor: PhaseCursor) -> GameState:
        """Dealer tops up to two cards, draws to 17, then the hand is settled."""
        deck = state.deck
        dealer = state.dealer_hand
        retry_limit = self.rules.draw_retry_limit

        if len(dealer) < 2:
            taken, deck = take_unique(
                deck, 2 - len(dealer), state.in_play, self.shuffler, retry_limit=retry_limit
            )
            dealer = (*dealer, *taken)

        draws = 0
        while hand_total(dealer) < self.rules.dealer_stand:
            if draws >= self.rules.dealer_draw_cap:
                logger.error(
                    "Dealer draw cap of %d reached at %.2f",
                    self.rules.dealer_draw_cap,
                    hand_total(dealer),
                )
                break
            taken, deck = take_unique(
                deck,
                1,
                in_play_ids(state.player_hand, dealer),
                self.shuffler,
                retry_limit=retry_limit,
            )
            dealer = (*dealer, *taken)
            draws += 1

        pt = hand_total(state.player_hand)
        dt = hand_total(dealer)
        kind = settle(pt, dt, state.player_initial_bust, self.rules)
        direction, message, note = SETTLEMENTS[kind]
        amounts = {"pt": pt, "dt": dt, "bet": state.bet}

        resolved = replace(
            state,
            phase=cursor.fire("resolve"),
            deck=deck,
            dealer_hand=dealer,
            bankroll=state.bankroll + direction * state.bet,
            message=message.format(**amounts),
        )
        return self._record(resolved, kind, note.format(**amounts))

    def _next_hand(self, state: GameState, action: Action, cursor: PhaseCursor) -> GameState:
        next_state = replace(
            state,
            phase=cursor.fire("next_hand"),
            deck=(*state.deck, *state.player_hand, *state.dealer_hand),
            player_hand=(),
            dealer_hand=(),
            bet=0,
            player_initial_bust=False,
            message=LOBBY_MESSAGE,
        )
        return self._record(next_state, AuditKind.NEXT_HAND, "Next hand -> lobby.")


_default_engine: TableEngine | None = None


def get_engine() -> TableEngine:
    """Get or create the default engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TableEngine()
    return _default_engine


def initial_state() -> GameState:
    """Create a fresh run with the default engine."""
    return get_engine().initial_state()


def reduce(state: GameState, action: Action) -> GameState:
    """Apply an action with the default engine."""
    return get_engine().reduce(state, action)
