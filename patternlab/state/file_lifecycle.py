from __future__ import annotations

from enum import Enum

from patternlab.config.settings import Settings
from patternlab.events.transition_log import TransitionLog

from .machine import Rule, StateMachine, advance, notice, reject


class FileState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    LOCKED = "LOCKED"


_FILE_CLOSED = "file closed"
_FILE_LOCKED = "file locked"


class FileContext(StateMachine):
    """A file whose reads and writes are only allowed while open and unlocked.

    Content belongs to the file, not to the open handle, so it survives close.
    Locking a closed file is rejected rather than implicitly opening it.
    """

    state_type = FileState
    initial_state = FileState.CLOSED
    operations = ("open", "close", "read", "write", "lock", "unlock")
    _rules: dict[tuple[FileState, str], Rule] = {
        (FileState.CLOSED, "open"): advance(FileState.OPEN),
        (FileState.CLOSED, "close"): notice("file already closed"),
        (FileState.CLOSED, "read"): reject(_FILE_CLOSED),
        (FileState.CLOSED, "write"): reject(_FILE_CLOSED),
        (FileState.CLOSED, "lock"): reject(_FILE_CLOSED),
        (FileState.CLOSED, "unlock"): reject(_FILE_CLOSED),
        (FileState.OPEN, "open"): notice("file already open"),
        (FileState.OPEN, "close"): advance(FileState.CLOSED),
        (FileState.OPEN, "read"): advance(FileState.OPEN),
        (FileState.OPEN, "write"): advance(FileState.OPEN),
        (FileState.OPEN, "lock"): advance(FileState.LOCKED),
        (FileState.OPEN, "unlock"): notice("file not locked"),
        (FileState.LOCKED, "open"): notice("file already open"),
        (FileState.LOCKED, "close"): reject(_FILE_LOCKED),
        (FileState.LOCKED, "read"): reject(_FILE_LOCKED),
        (FileState.LOCKED, "write"): reject(_FILE_LOCKED),
        (FileState.LOCKED, "lock"): notice("file already locked"),
        (FileState.LOCKED, "unlock"): advance(FileState.OPEN),
    }

    def __init__(
        self,
        name: str | None = None,
        *,
        settings: Settings | None = None,
        transition_log: TransitionLog | None = None,
    ) -> None:
        super().__init__(name, settings=settings, transition_log=transition_log)
        self._lines: list[str] = []

    def open(self) -> None:
        self._dispatch("open")

    def close(self) -> None:
        self._dispatch("close")

    def read(self) -> str:
        """Return every write so far, one per line.

        Writes are joined with newlines, so a write containing a newline reads
        back the same as two separate writes, and a single empty write reads
        back as an empty file. Use ``writes`` for the individual values.
        """
        return self._dispatch("read", lambda: "\n".join(self._lines))

    def writes(self) -> list[str]:
        """Individual values written so far, in order. Same state rules as ``read``."""
        return self._dispatch("read", lambda: list(self._lines))

    def write(self, data: str) -> None:
        self._dispatch("write", lambda: self._lines.append(str(data)))

    def lock(self) -> None:
        self._dispatch("lock")

    def unlock(self) -> None:
        self._dispatch("unlock")
