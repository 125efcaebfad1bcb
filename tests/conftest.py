"""Pytest fixtures for table engine tests."""

from random import Random

import pytest

from engine.cards import Card, build_deck
from engine.game import GameState, Phase, TableEngine
from engine.rules import TableRules
from engine.shuffle import Shuffler

FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shuffler(rng):
    """A shuffler driven by the seeded generator."""
    return Shuffler(rng)


@pytest.fixture
def clock():
    """A frozen wall clock."""
    return lambda: FIXED_NOW


@pytest.fixture
def rules():
    """Default table rules."""
    return TableRules()


@pytest.fixture
def engine(rng, clock, rules):
    """An engine with reproducible shuffles and timestamps."""
    return TableEngine(rules=rules, rng=rng, clock=clock)


@pytest.fixture
def fresh(engine):
    """A fresh run in the lobby."""
    return engine.initial_state()


def cards(*ids: str) -> tuple[Card, ...]:
    """Build cards from ids like 'Spade-11'."""
    return tuple(Card.from_id(i) for i in ids)


def stack_deck(*front: str, exclude: tuple[str, ...] = ()) -> tuple[Card, ...]:
    """
    A deck with the given cards on top, then the rest in canonical order.

    Ids in ``exclude`` (cards held in hands) are left out.
    """
    skip = set(front) | set(exclude)
    rest = tuple(c for c in build_deck() if c.id not in skip)
    return cards(*front) + rest


@pytest.fixture
def stacked(engine):
    """
    Build a valid state with a stacked deck.

    Usage: ``stacked("Spade-10", "Heart-9", bet=10)`` for a lobby state, or
    pass ``player``/``dealer`` id tuples and a ``phase`` for mid-hand states.
    """

    def build(
        *front: str,
        player: tuple[str, ...] = (),
        dealer: tuple[str, ...] = (),
        phase: Phase = Phase.LOBBY,
        bet: int = 10,
        bankroll: int | None = None,
        **overrides,
    ) -> GameState:
        return GameState(
            seed=1234,
            deck=stack_deck(*front, exclude=player + dealer),
            phase=phase,
            player_hand=cards(*player),
            dealer_hand=cards(*dealer),
            bankroll=engine.rules.starting_bankroll if bankroll is None else bankroll,
            bet=bet,
            **overrides,
        )

    return build
