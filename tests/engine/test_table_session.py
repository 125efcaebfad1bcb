"""Tests for the session host loop."""

import pytest

from engine.audit import AuditKind
from engine.game import Action, Phase, TableSession


@pytest.fixture
def session(engine):
    return TableSession(engine=engine)


class TestTableSession:
    def test_starts_with_fresh_run(self, session):
        assert session.state.phase is Phase.LOBBY
        assert len(session.state.deck) == 77
        assert len(session.history) == 0

    def test_dispatch_replaces_state(self, session):
        first = session.state
        state = session.dispatch(Action.bet_add(20))
        assert session.state is state
        assert state is not first
        assert first.bet == 0
        assert state.bet == 20

    def test_uses_given_state(self, engine, stacked):
        state = stacked("Spade-5", "Heart-9", "Diamond-6", "Club-8")
        session = TableSession(engine=engine, state=state)
        session.dispatch(Action.start())
        assert session.state.player_total == 11.04

    def test_subscribers_receive_new_entries(self, engine, stacked):
        session = TableSession(engine=engine, state=stacked("Spade-5", "Heart-9", "Diamond-6", "Club-8"))
        seen = []
        session.subscribe(seen.append)
        session.dispatch(Action.start())
        session.dispatch(Action.stand())
        assert [e.kind for e in seen] == [AuditKind.START, AuditKind.STAND, AuditKind.LOSS]

    def test_subscribe_to_one_kind(self, session):
        blocked = []
        session.subscribe(blocked.append, AuditKind.START_BLOCKED)
        session.dispatch(Action.bet_add(10))
        session.dispatch(Action.reset_bet())
        session.dispatch(Action.start())
        assert [e.note for e in blocked] == ["Start blocked: no bet."]

    def test_ignored_actions_emit_nothing(self, session):
        seen = []
        session.subscribe(seen.append)
        session.dispatch(Action.stand())
        assert seen == []

    def test_reset_run_emits_entry(self, session):
        seen = []
        session.dispatch(Action.bet_add(10))
        session.subscribe(seen.append)
        session.dispatch(Action.reset_run())
        assert [e.kind for e in seen] == [AuditKind.RESET_RUN]

    def test_unsubscribe(self, session):
        seen = []
        session.subscribe(seen.append)
        session.unsubscribe(seen.append)
        session.unsubscribe(print, AuditKind.WIN)
        session.dispatch(Action.bet_add(10))
        assert seen == []

    def test_history_is_state_log(self, session):
        session.dispatch(Action.bet_place_cta())
        assert session.history is session.state.log
        assert session.history.kinds() == [AuditKind.BET_PLACE_CTA]
