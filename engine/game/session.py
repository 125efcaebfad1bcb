"""Host loop that owns a game state and publishes its audit entries."""

from typing import Callable

from engine.audit import AuditEntry, AuditKind, AuditLog
from engine.game.actions import Action
from engine.game.engine import TableEngine
from engine.game.state import GameState

# Type alias for audit entry handlers
EntryHandler = Callable[[AuditEntry], None]


class TableSession:
    """
    Owns the lifecycle of one game.

    Creates the state at session start and replaces it on every dispatch.
    Subscribers see each new audit entry; callers only ever hold immutable
    states.
    """

    def __init__(
        self,
        engine: TableEngine | None = None,
        state: GameState | None = None,
    ) -> None:
        """Initialize the session with a fresh run unless a state is given."""
        self.engine = engine or TableEngine()
        self._state = state if state is not None else self.engine.initial_state()
        self._handlers: dict[AuditKind | None, list[EntryHandler]] = {}

    @property
    def state(self) -> GameState:
        """Return the current state."""
        return self._state

    @property
    def history(self) -> AuditLog:
        """Return the audit log of the current state."""
        return self._state.log

    def subscribe(self, handler: EntryHandler, kind: AuditKind | None = None) -> None:
        """
        Subscribe to audit entries.

        Args:
            handler: Function to call for each new entry
            kind: Specific tag to subscribe to, or None for all entries
        """
        self._handlers.setdefault(kind, []).append(handler)

    def unsubscribe(self, handler: EntryHandler, kind: AuditKind | None = None) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(kind, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, action: Action) -> GameState:
        """
        Apply an action and publish the entries it added.

        Returns:
            The new current state
        """
        previous = self._state
        self._state = self.engine.reduce(previous, action)
        for entry in _new_entries(previous.log, self._state.log):
            self._emit(entry)
        return self._state

    def _emit(self, entry: AuditEntry) -> None:
        for handler in self._handlers.get(entry.kind, []):
            handler(entry)
        for handler in self._handlers.get(None, []):
            handler(entry)


def _new_entries(before: AuditLog, after: AuditLog) -> list[AuditEntry]:
    """Return the entries in ``after`` that were not in ``before``."""
    if after is before:
        return []
    known = {id(entry) for entry in before}
    return [entry for entry in after if id(entry) not in known]
