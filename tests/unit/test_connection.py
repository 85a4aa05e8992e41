import pytest

from patternlab.config.settings import Settings
from patternlab.events.transition_log import TransitionEventType, TransitionLog
from patternlab.state import ConnectionState, DatabaseConnection, IllegalStateTransitionError


def build_connection(strict: bool = False) -> DatabaseConnection:
    return DatabaseConnection(
        "orders-db",
        settings=Settings(STRICT_TRANSITIONS=strict),
        transition_log=TransitionLog(),
    )


def test_query_while_disconnected_fails() -> None:
    db = build_connection()
    assert db.label == "DISCONNECTED"

    with pytest.raises(IllegalStateTransitionError, match="not connected"):
        db.execute_query("SELECT 1")
    assert db.queries_executed == 0


def test_connect_query_disconnect() -> None:
    db = build_connection()
    db.connect()
    assert db.current_state == ConnectionState.CONNECTED

    first = db.execute_query("  SELECT 1  ")
    second = db.execute_query("SELECT 2")

    assert first.statement == "SELECT 1"
    assert first.sequence == 1
    assert second.sequence == 2
    assert second.connection == "orders-db"
    assert db.current_state == ConnectionState.CONNECTED

    db.disconnect()
    assert db.label == "DISCONNECTED"


def test_empty_query_rejected_without_counting() -> None:
    db = build_connection()
    db.connect()

    with pytest.raises(ValueError, match="must not be empty"):
        db.execute_query("   ")
    assert db.queries_executed == 0
    assert db.current_state == ConnectionState.CONNECTED


def test_repeated_connect_and_disconnect_are_noops() -> None:
    db = build_connection()
    db.disconnect()
    db.disconnect()
    db.connect()
    db.connect()
    assert db.current_state == ConnectionState.CONNECTED

    notices = db.transition_log.read_events(event_type=TransitionEventType.NOTICE)
    assert [event.operation for event in notices] == [
        "disconnect",
        "disconnect",
        "connect",
    ]


def test_strict_mode_rejects_double_connect() -> None:
    db = build_connection(strict=True)
    db.connect()
    with pytest.raises(IllegalStateTransitionError, match="already connected"):
        db.connect()


def test_transition_table_is_total() -> None:
    table = DatabaseConnection.transition_table()
    assert set(table) == {
        (state, operation)
        for state in ConnectionState
        for operation in DatabaseConnection.operations
    }
