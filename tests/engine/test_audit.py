"""Tests for the audit log."""

import pytest

from engine.audit import AuditEntry, AuditKind, AuditLog, Snapshot
from engine.game import Phase


def make_entry(n: int, snapshot: Snapshot) -> AuditEntry:
    return AuditEntry(timestamp=n, kind=AuditKind.BET_ADD, note=f"entry {n}", snapshot=snapshot)


@pytest.fixture
def snapshot(stacked):
    return Snapshot.of(
        stacked(player=("Spade-11", "Heart-11"), dealer=("Key-2", "Star-3"), phase=Phase.PLAYER)
    )


class TestSnapshot:
    """Tests for state snapshots."""

    def test_snapshot_fields(self, snapshot):
        assert snapshot.seed == 1234
        assert snapshot.phase == "PLAYER"
        assert snapshot.deck == 73
        assert snapshot.bet == 10
        assert snapshot.player_total == 22.03
        assert snapshot.dealer_total == 5.13
        assert snapshot.player_hand == ("Spade-11", "Heart-11")
        assert snapshot.dealer_hand == ("Key-2", "Star-3")

    def test_snapshot_to_dict(self, snapshot):
        data = snapshot.to_dict()
        assert data["playerTotal"] == 22.03
        assert data["dealerHand"] == ["Key-2", "Star-3"]
        assert data["deck"] == 73


class TestAuditLog:
    """Tests for the bounded log."""

    def test_append_returns_new_log(self, snapshot):
        log = AuditLog()
        longer = log.append(make_entry(1, snapshot))
        assert len(log) == 0
        assert len(longer) == 1
        assert longer.last.note == "entry 1"

    def test_capacity_drops_oldest(self, snapshot):
        log = AuditLog(capacity=3)
        for n in range(5):
            log = log.append(make_entry(n, snapshot))
        assert len(log) == 3
        assert [e.timestamp for e in log] == [2, 3, 4]

    def test_default_capacity(self, snapshot):
        log = AuditLog()
        for n in range(250):
            log = log.append(make_entry(n, snapshot))
        assert len(log) == 200
        assert log[0].timestamp == 50
        assert log[-1].timestamp == 249

    def test_oversized_entries_trimmed(self, snapshot):
        entries = tuple(make_entry(n, snapshot) for n in range(4))
        assert [e.timestamp for e in AuditLog(entries, capacity=2)] == [2, 3]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            AuditLog(capacity=0)

    def test_empty_log(self):
        log = AuditLog()
        assert log.last is None
        assert log.to_list() == []

    def test_entry_to_dict(self, snapshot):
        data = make_entry(7, snapshot).to_dict()
        assert data["at"] == 7
        assert data["kind"] == "BET_ADD"
        assert data["note"] == "entry 7"
        assert data["snapshot"]["phase"] == "PLAYER"


class TestAuditKind:
    def test_blocked_kinds(self):
        assert AuditKind.START_BLOCKED.is_blocked
        assert AuditKind.DRAW_BLOCKED.is_blocked
        assert not AuditKind.START.is_blocked

    def test_kind_is_string_tag(self):
        assert AuditKind.PUSH == "PUSH"
        assert str(AuditKind.DEALT_BUST_WIN) == "DEALT_BUST_WIN"
