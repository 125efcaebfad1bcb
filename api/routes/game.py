"""Game API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    ActionRequest,
    AuditEntryResponse,
    CardResponse,
    SessionResponse,
    SnapshotResponse,
    TableStateResponse,
)
from api.session import create_session, extract_session_id, get_session_store
from config import config
from engine.audit import AuditEntry
from engine.cards import Card
from engine.game import Action, GameState, TableEngine
from engine.views import export_run, summarize

logger = logging.getLogger(__name__)

router = APIRouter()

_engine = TableEngine(rules=config.game.rules())


def get_engine() -> TableEngine:
    """Return the engine shared by all sessions."""
    return _engine


def _card_response(card: Card) -> CardResponse:
    return CardResponse(
        id=card.id,
        suit=str(card.suit),
        value=card.value,
        rank=card.rank,
        score=card.score,
    )


def _entry_response(entry: AuditEntry) -> AuditEntryResponse:
    snapshot = entry.snapshot
    return AuditEntryResponse(
        at=entry.timestamp,
        kind=entry.kind.value,
        note=entry.note,
        snapshot=SnapshotResponse(
            seed=snapshot.seed,
            phase=snapshot.phase,
            deck=snapshot.deck,
            bankroll=snapshot.bankroll,
            bet=snapshot.bet,
            player_total=snapshot.player_total,
            dealer_total=snapshot.dealer_total,
            player_hand=list(snapshot.player_hand),
            dealer_hand=list(snapshot.dealer_hand),
        ),
    )


def _state_response(state: GameState) -> TableStateResponse:
    """Convert game state to response."""
    summary = summarize(state)
    return TableStateResponse(
        seed=summary.seed,
        phase=summary.phase.name,
        player_hand=[_card_response(c) for c in state.player_hand],
        dealer_hand=[_card_response(c) for c in state.dealer_hand],
        player_total=summary.player_total,
        dealer_total=summary.dealer_total,
        deck_count=summary.deck_count,
        bankroll=summary.bankroll,
        bet=summary.bet,
        player_initial_bust=summary.player_initial_bust,
        message=summary.message,
        can_bet=summary.can_bet,
        can_start=summary.can_start,
        can_draw=summary.can_draw,
        can_stand=summary.can_stand,
        can_next_hand=summary.can_next_hand,
        log=[_entry_response(e) for e in summary.log],
    )


async def _load_state(token: str) -> tuple[str, GameState]:
    """Resolve a session token to its stored state."""
    session_id = extract_session_id(token)
    if session_id is None:
        raise HTTPException(status_code=404, detail="Unknown session")

    state = await get_session_store().get(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    return session_id, state


@router.post("/new")
async def new_game() -> SessionResponse:
    """Create a new game session with a fresh run."""
    token = await create_session(get_engine().initial_state())
    return SessionResponse(session_id=token)


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> TableStateResponse:
    """Get current game state."""
    _, state = await _load_state(session_id)
    return _state_response(state)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> TableStateResponse:
    """
    Apply an action to the session's game.

    Rule rejections are not HTTP errors: the state comes back with an
    updated message and a blocked audit entry.
    """
    raw_id, state = await _load_state(session_id)

    try:
        action = Action.parse(request.action, request.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    state = get_engine().reduce(state, action)
    await get_session_store().set(raw_id, state)
    return _state_response(state)


@router.get("/export")
async def export_game(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> dict[str, Any]:
    """Export the run as a debug payload."""
    _, state = await _load_state(session_id)
    return export_run(state)
