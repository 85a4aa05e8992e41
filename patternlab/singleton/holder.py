"""Lazily created single instances with double-checked locking."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Generic, TypeVar

from patternlab.config.settings import Settings
from patternlab.events.transition_log import TransitionLog


T = TypeVar("T")


class SingletonHolder(Generic[T]):
    """Create one instance on first use and hand out the same object afterwards.

    The unlocked read is a fast path only. Creation happens under the lock and
    re-checks the slot, so two threads racing on an empty holder build one
    instance between them.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._instance: T | None = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._instance is not None

    def get(self) -> T:
        instance = self._instance
        if instance is not None:
            return instance

        with self._lock:
            if self._instance is None:
                self._instance = self._factory()
            return self._instance

    def reset(self) -> None:
        with self._lock:
            self._instance = None


_settings_holder: SingletonHolder[Settings] = SingletonHolder(Settings)


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call."""
    return _settings_holder.get()


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads the environment."""
    _settings_holder.reset()


_transition_logs: dict[Path, SingletonHolder[TransitionLog]] = {}
_transition_logs_lock = threading.Lock()


def get_transition_log(log_path: str | Path) -> TransitionLog:
    """Return the one TransitionLog writing to ``log_path``, creating it on first use."""
    key = Path(log_path).resolve()
    with _transition_logs_lock:
        holder = _transition_logs.get(key)
        if holder is None:
            holder = SingletonHolder(lambda: TransitionLog(key))
            _transition_logs[key] = holder
    return holder.get()


def reset_transition_logs() -> None:
    with _transition_logs_lock:
        _transition_logs.clear()
