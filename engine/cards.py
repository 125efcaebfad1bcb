"""Card and deck factory - immutable card representations and scoring."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable

_CENTS = Decimal("0.01")

MIN_VALUE = 1
MAX_VALUE = 11


class Suit(Enum):
    """Card suits, in canonical deck order, with their tie-break rank."""

    SPADE = 1
    HEART = 2
    DIAMOND = 3
    CLUB = 4
    CROWN = 5
    KEY = 6
    STAR = 7

    def __str__(self) -> str:
        return self.name.title()

    @property
    def rank(self) -> int:
        """Return the suit rank (1 = highest)."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Suit":
        """Look up a suit by its display name ('Spade', 'star', ...)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid suit: {name}") from None


def round2(amount: Decimal | float | int) -> Decimal:
    """Round half-up to two decimal places."""
    return Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    suit: Suit
    value: int

    def __post_init__(self) -> None:
        if not MIN_VALUE <= self.value <= MAX_VALUE:
            raise ValueError(f"Card value must be between {MIN_VALUE} and {MAX_VALUE}")

    def __str__(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"Card({self.suit.name}, {self.value})"

    @property
    def id(self) -> str:
        """Return the globally unique card id, e.g. 'Spade-11'."""
        return f"{self.suit}-{self.value}"

    @property
    def rank(self) -> int:
        """Return the suit rank used for fractional scoring."""
        return self.suit.rank

    @property
    def exact_score(self) -> Decimal:
        return round2(Decimal(self.value) + Decimal(self.rank) / 100)

    @property
    def score(self) -> float:
        """Return the card score: value plus rank hundredths."""
        return float(self.exact_score)

    def to_dict(self) -> dict[str, str | int]:
        """Return the card record used in exports."""
        return {
            "suit": str(self.suit),
            "value": self.value,
            "rank": self.rank,
            "id": self.id,
        }

    @classmethod
    def from_id(cls, card_id: str) -> "Card":
        """Create a card from an id like 'Star-1'."""
        suit_str, sep, value_str = card_id.strip().rpartition("-")
        if not sep or not value_str.isdigit():
            raise ValueError(f"Invalid card id: {card_id}")
        return cls(Suit.from_name(suit_str), int(value_str))


def build_deck() -> tuple[Card, ...]:
    """Build the canonical 77-card universe in fixed order."""
    return tuple(
        Card(suit, value)
        for suit in Suit
        for value in range(MIN_VALUE, MAX_VALUE + 1)
    )


CANONICAL_IDS: frozenset[str] = frozenset(card.id for card in build_deck())


def card_score(card: Card) -> float:
    """Score a single card."""
    return card.score


def hand_total(cards: Iterable[Card]) -> float:
    """
    Sum the scores of a hand.

    Scoring is order-independent and exact: card scores are added as
    decimals and the sum is rounded once.
    """
    return float(round2(sum((card.exact_score for card in cards), Decimal(0))))


def card_ids(cards: Iterable[Card]) -> list[str]:
    """Return the ids of the given cards, in order."""
    return [card.id for card in cards]
