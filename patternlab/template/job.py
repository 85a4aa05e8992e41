from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from patternlab.state.connection import ConnectionState, DatabaseConnection, QueryResult


class ConnectionJob(ABC):
    """Fixed connect / query / summarize / disconnect skeleton.

    Subclasses supply ``statements`` and ``summarize`` and may override
    ``prepare``. ``run`` itself is not meant to be overridden. A connection that
    is already connected when ``run`` starts belongs to the caller and is left
    connected afterwards.
    """

    def __init__(self, connection: DatabaseConnection) -> None:
        self.connection = connection

    def run(self) -> dict[str, Any]:
        owns_connection = self.connection.current_state == ConnectionState.DISCONNECTED
        if owns_connection:
            self.connection.connect()
        try:
            self.prepare()
            results = [self.connection.execute_query(sql) for sql in self.statements()]
            return self.summarize(results)
        finally:
            if owns_connection:
                self.connection.disconnect()

    def prepare(self) -> None:
        return None

    @abstractmethod
    def statements(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def summarize(self, results: list[QueryResult]) -> dict[str, Any]:
        raise NotImplementedError


class ReportJob(ConnectionJob):
    def __init__(self, connection: DatabaseConnection, tables: list[str]) -> None:
        super().__init__(connection)
        self.tables = [str(table).strip() for table in tables if str(table).strip()]

    def statements(self) -> list[str]:
        return [f"SELECT COUNT(*) FROM {table}" for table in self.tables]

    def summarize(self, results: list[QueryResult]) -> dict[str, Any]:
        return {
            "tables": list(self.tables),
            "queries": len(results),
            "connection": self.connection.name,
        }
