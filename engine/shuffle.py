"""Fisher-Yates shuffling over a cryptographically strong random source."""

from random import Random, SystemRandom
from typing import Iterable, TypeVar

T = TypeVar("T")

SEED_BITS = 32


class Shuffler:
    """
    Uniform shuffler and display-seed source.

    Uses the operating system CSPRNG unless an explicit generator is given;
    tests pass a seeded ``Random`` for reproducible decks.
    """

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize the shuffler."""
        self._rng = rng or SystemRandom()

    def shuffle(self, items: Iterable[T]) -> tuple[T, ...]:
        """
        Return a uniformly random permutation of the items.

        Walks from the back, drawing a fresh swap index for every position.
        """
        cards = list(items)
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            cards[i], cards[j] = cards[j], cards[i]
        return tuple(cards)

    def new_seed(self) -> int:
        """Draw a non-zero 32-bit display seed. Not used for shuffling."""
        return self._rng.getrandbits(SEED_BITS) or 1
