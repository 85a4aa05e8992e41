from .connection import ConnectionState, DatabaseConnection, QueryResult
from .file_lifecycle import FileContext, FileState
from .machine import (
    IllegalStateTransitionError,
    Outcome,
    Rule,
    StateMachine,
    validate_rules,
)

__all__ = [
    "StateMachine",
    "Rule",
    "Outcome",
    "IllegalStateTransitionError",
    "validate_rules",
    "FileState",
    "FileContext",
    "ConnectionState",
    "DatabaseConnection",
    "QueryResult",
]
