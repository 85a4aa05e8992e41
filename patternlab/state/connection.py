from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from patternlab.config.settings import Settings
from patternlab.events.transition_log import TransitionLog

from .machine import Rule, StateMachine, advance, notice, reject


class ConnectionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"


@dataclass(frozen=True)
class QueryResult:
    statement: str
    sequence: int
    connection: str


class DatabaseConnection(StateMachine):
    state_type = ConnectionState
    initial_state = ConnectionState.DISCONNECTED
    operations = ("connect", "disconnect", "execute_query")
    _rules: dict[tuple[ConnectionState, str], Rule] = {
        (ConnectionState.DISCONNECTED, "connect"): advance(ConnectionState.CONNECTED),
        (ConnectionState.DISCONNECTED, "disconnect"): notice("already disconnected"),
        (ConnectionState.DISCONNECTED, "execute_query"): reject("not connected"),
        (ConnectionState.CONNECTED, "connect"): notice("already connected"),
        (ConnectionState.CONNECTED, "disconnect"): advance(ConnectionState.DISCONNECTED),
        (ConnectionState.CONNECTED, "execute_query"): advance(ConnectionState.CONNECTED),
    }

    def __init__(
        self,
        name: str | None = None,
        *,
        settings: Settings | None = None,
        transition_log: TransitionLog | None = None,
    ) -> None:
        super().__init__(name, settings=settings, transition_log=transition_log)
        self.queries_executed = 0

    def connect(self) -> None:
        self._dispatch("connect")

    def disconnect(self) -> None:
        self._dispatch("disconnect")

    def execute_query(self, sql: str) -> QueryResult:
        statement = str(sql).strip()

        def run() -> QueryResult:
            if not statement:
                raise ValueError("query must not be empty")
            self.queries_executed += 1
            return QueryResult(
                statement=statement,
                sequence=self.queries_executed,
                connection=self.name,
            )

        return self._dispatch("execute_query", run)
