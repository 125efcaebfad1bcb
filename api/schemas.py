"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ActionRequest(BaseModel):
    """Request for a game action."""

    action: Literal[
        "RESET_RUN",
        "SHUFFLE",
        "BET_ADD",
        "RESET_BET",
        "BET_PLACE_CTA",
        "START",
        "DRAW",
        "STAND",
        "DEALER_PLAY",
        "NEXT_HAND",
    ]
    amount: int | None = Field(
        default=None,
        description="Bet increment for BET_ADD, card count (1 or 2) for DRAW",
    )


class SessionResponse(BaseModel):
    """A new session token."""

    session_id: str


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    suit: str
    value: int
    rank: int
    score: float


class SnapshotResponse(BaseModel):
    """State snapshot recorded with an audit entry."""

    seed: int
    phase: str
    deck: int
    bankroll: int
    bet: int
    player_total: float
    dealer_total: float
    player_hand: list[str]
    dealer_hand: list[str]


class AuditEntryResponse(BaseModel):
    """One audit log entry."""

    at: int
    kind: str
    note: str
    snapshot: SnapshotResponse


class TableStateResponse(BaseModel):
    """Current table state."""

    seed: int
    phase: Literal["LOBBY", "PLAYER", "DEALER", "DONE"]
    player_hand: list[CardResponse]
    dealer_hand: list[CardResponse]
    player_total: float
    dealer_total: float
    deck_count: int
    bankroll: int
    bet: int
    player_initial_bust: bool
    message: str
    can_bet: bool
    can_start: bool
    can_draw: bool
    can_stand: bool
    can_next_hand: bool
    log: list[AuditEntryResponse]
