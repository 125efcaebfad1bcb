"""Card table engine - 100% UI-agnostic."""

from engine.cards import Card, Suit, build_deck, card_score, hand_total
from engine.audit import AuditEntry, AuditKind, AuditLog, Snapshot
from engine.rules import TableRules
from engine.shuffle import Shuffler

__all__ = [
    "Card",
    "Suit",
    "build_deck",
    "card_score",
    "hand_total",
    "AuditEntry",
    "AuditKind",
    "AuditLog",
    "Snapshot",
    "TableRules",
    "Shuffler",
]
