"""
Transition Log - Journal of state machine operations for debugging and replay checks.
"""
from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path


class TransitionEventType(str, Enum):
    """Outcome recorded for one operation."""

    ADVANCED = "advanced"
    NOTICE = "notice"
    REJECTED = "rejected"


@dataclass
class TransitionEvent:
    """One operation applied to a state machine."""

    event_type: TransitionEventType
    timestamp: str
    machine: str
    operation: str
    from_state: str
    to_state: str
    message: str = ""


class TransitionLog:
    """Keep transition events in memory, or append them to a JSONL file when a path is given."""

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path) if log_path is not None else None
        if self.log_path is not None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._events: list[TransitionEvent] = []
        self._lock = threading.Lock()

    def log_event(self, event: TransitionEvent) -> None:
        """Record one event; append it to the JSONL file when one is configured."""
        with self._lock:
            if self.log_path is None:
                self._events.append(event)
                return
            with open(self.log_path, "a", encoding="utf-8", newline="\n") as handle:
                handle.write(json.dumps(asdict(event), ensure_ascii=True) + "\n")
                handle.flush()

    def record(
        self,
        event_type: TransitionEventType,
        machine: str,
        operation: str,
        from_state: str,
        to_state: str,
        message: str = "",
    ) -> TransitionEvent:
        event = TransitionEvent(
            event_type=event_type,
            timestamp=datetime.now(timezone.utc).isoformat(),
            machine=machine,
            operation=operation,
            from_state=from_state,
            to_state=to_state,
            message=message,
        )
        self.log_event(event)
        return event

    def _load(self) -> list[TransitionEvent]:
        if self.log_path is None:
            with self._lock:
                return list(self._events)

        if not self.log_path.exists():
            return []

        events: list[TransitionEvent] = []
        with open(self.log_path, "r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue

                event_dict = json.loads(line)
                events.append(
                    TransitionEvent(
                        event_type=TransitionEventType(event_dict["event_type"]),
                        timestamp=event_dict["timestamp"],
                        machine=event_dict["machine"],
                        operation=event_dict["operation"],
                        from_state=event_dict["from_state"],
                        to_state=event_dict["to_state"],
                        message=event_dict.get("message", ""),
                    )
                )
        return events

    def read_events(
        self,
        event_type: TransitionEventType | None = None,
        since: datetime | None = None,
        machine: str | None = None,
    ) -> list[TransitionEvent]:
        """Read events with optional filtering. File-backed logs read from disk."""
        normalized_since = since
        if normalized_since is not None and normalized_since.tzinfo is None:
            normalized_since = normalized_since.replace(tzinfo=timezone.utc)

        events: list[TransitionEvent] = []
        for event in self._load():
            if event_type is not None and event.event_type != event_type:
                continue

            if machine is not None and event.machine != machine:
                continue

            if normalized_since is not None:
                event_time = datetime.fromisoformat(event.timestamp)
                if event_time.tzinfo is None:
                    event_time = event_time.replace(tzinfo=timezone.utc)
                if event_time < normalized_since:
                    continue

            events.append(event)

        return events

    def clear(self) -> None:
        """Drop every recorded event, truncating the JSONL file when one is configured."""
        with self._lock:
            self._events.clear()
            if self.log_path is not None and self.log_path.exists():
                self.log_path.write_text("", encoding="utf-8")
