"""Tests for the summary view and export payload."""

import json

import pytest

from engine.game import Action, Phase
from engine.views import EXPORT_VERSION, export_run, export_run_json, summarize
from tests.conftest import FIXED_NOW


@pytest.fixture
def dealt(engine, stacked):
    return engine.reduce(stacked("Spade-11", "Diamond-10", "Heart-11", "Club-6"), Action.start())


class TestSummary:
    def test_summary_fields(self, dealt):
        summary = summarize(dealt)
        assert summary.phase is Phase.PLAYER
        assert summary.player_total == 22.03
        assert summary.dealer_total == 16.07
        assert summary.deck_count == 73
        assert summary.player_hand == ("Spade-11", "Heart-11")
        assert summary.dealer_hand == ("Diamond-10", "Club-6")
        assert summary.log is dealt.log

    def test_controls_after_dealt_bust(self, dealt):
        summary = summarize(dealt)
        assert summary.can_stand
        assert not summary.can_draw
        assert not summary.can_bet
        assert not summary.can_next_hand

    def test_controls_in_lobby(self, engine, fresh):
        assert not summarize(fresh).can_start
        summary = summarize(engine.reduce(fresh, Action.bet_add(10)))
        assert summary.can_bet
        assert summary.can_start


class TestExport:
    def test_payload_shape(self, dealt, clock):
        payload = export_run(dealt, clock)
        assert payload["version"] == EXPORT_VERSION == "p77-beta"
        assert payload["createdAt"] == "2023-11-14T22:13:20.000Z"
        assert payload["state"] == {
            "seed": 1234,
            "phase": "PLAYER",
            "deckCount": 73,
            "bankroll": 10000,
            "bet": 10,
            "playerHand": [
                {"suit": "Spade", "value": 11, "rank": 1, "id": "Spade-11"},
                {"suit": "Heart", "value": 11, "rank": 2, "id": "Heart-11"},
            ],
            "dealerHand": [
                {"suit": "Diamond", "value": 10, "rank": 3, "id": "Diamond-10"},
                {"suit": "Club", "value": 6, "rank": 4, "id": "Club-6"},
            ],
            "playerInitialBust": True,
            "message": "Dealt bust. Only STAND is allowed.",
        }
        assert [entry["kind"] for entry in payload["log"]] == ["START"]
        assert payload["log"][0]["at"] == int(FIXED_NOW * 1000)

    def test_json_round_trip(self, dealt, clock):
        text = export_run_json(dealt, clock)
        assert json.loads(text) == export_run(dealt, clock)
