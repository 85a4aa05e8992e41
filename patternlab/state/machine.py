from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar

from patternlab.config.settings import Settings
from patternlab.events.transition_log import TransitionEvent, TransitionEventType, TransitionLog
from patternlab.singleton.holder import get_settings, get_transition_log


logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    ADVANCE = "advance"
    NOTICE = "notice"
    REJECT = "reject"


@dataclass(frozen=True)
class Rule:
    """One (state, operation) cell of a transition table."""

    outcome: Outcome
    target: Enum | None = None
    message: str = ""


def advance(target: Enum) -> Rule:
    return Rule(Outcome.ADVANCE, target=target)


def notice(message: str) -> Rule:
    return Rule(Outcome.NOTICE, message=message)


def reject(message: str) -> Rule:
    return Rule(Outcome.REJECT, message=message)


class IllegalStateTransitionError(ValueError):
    """Raised when an operation is not valid in the current state."""

    def __init__(self, operation: str, state: Enum, message: str) -> None:
        self.operation = operation
        self.state = state
        self.message = message
        super().__init__(f"Invalid operation '{operation}' in state {state.value}: {message}")


def validate_rules(
    state_type: type[Enum],
    operations: tuple[str, ...],
    rules: dict[tuple[Enum, str], Rule],
) -> None:
    """Check that a table covers every (state, operation) pair and nothing else."""
    if not operations:
        raise ValueError("state machine must declare at least one operation")

    expected = {(state, operation) for state in state_type for operation in operations}
    missing = expected - set(rules)
    if missing:
        cells = sorted(f"{state.value}.{operation}" for state, operation in missing)
        raise ValueError(f"transition table is not total, missing: {', '.join(cells)}")

    unknown = set(rules) - expected
    if unknown:
        cells = sorted(f"{state!r}.{operation}" for state, operation in unknown)
        raise ValueError(f"transition table has unknown cells: {', '.join(cells)}")

    for (state, operation), rule in rules.items():
        if rule.outcome == Outcome.ADVANCE and not isinstance(rule.target, state_type):
            raise ValueError(
                f"rule {state.value}.{operation} advances to a non-state target: {rule.target!r}"
            )


class StateMachine:
    """Context holding one current state and dispatching operations through a table.

    Subclasses declare ``state_type``, ``initial_state``, ``operations`` and
    ``_rules``; the table is validated when the subclass is created. Reads and
    writes of the current state, and the effect of an advancing operation, run
    under a per-instance lock.
    """

    state_type: ClassVar[type[Enum]]
    initial_state: ClassVar[Enum]
    operations: ClassVar[tuple[str, ...]] = ()
    _rules: ClassVar[dict[tuple[Enum, str], Rule]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "_rules" in cls.__dict__:
            validate_rules(cls.state_type, cls.operations, cls._rules)
            if not isinstance(cls.initial_state, cls.state_type):
                raise ValueError(f"initial state is not a {cls.state_type.__name__}")

    def __init__(
        self,
        name: str | None = None,
        *,
        settings: Settings | None = None,
        transition_log: TransitionLog | None = None,
    ) -> None:
        resolved = settings or get_settings()
        self.name = name or type(self).__name__
        self.strict = resolved.STRICT_TRANSITIONS
        if transition_log is None:
            # contexts configured with the same path share one log and its lock
            transition_log = (
                get_transition_log(resolved.TRANSITION_LOG_PATH)
                if resolved.TRANSITION_LOG_PATH is not None
                else TransitionLog()
            )
        self.transition_log = transition_log
        self._state = self.initial_state
        self._lock = threading.RLock()

    @property
    def current_state(self) -> Enum:
        with self._lock:
            return self._state

    @property
    def label(self) -> str:
        return str(self.current_state.value)

    @classmethod
    def transition_table(cls) -> dict[tuple[Enum, str], Rule]:
        return dict(cls._rules)

    def history(self) -> list[TransitionEvent]:
        """Events recorded for this context only, even when its log is shared."""
        return self.transition_log.read_events(machine=self.name)

    def rule_for(self, operation: str, state: Enum | None = None) -> Rule:
        if operation not in self.operations:
            raise ValueError(f"Unknown operation for {type(self).__name__}: {operation}")
        return self._rules[(state if state is not None else self.current_state, operation)]

    def can_apply(self, operation: str) -> bool:
        rule = self.rule_for(operation)
        if rule.outcome == Outcome.REJECT:
            return False
        if rule.outcome == Outcome.NOTICE and self.strict:
            return False
        return True

    def _record(
        self,
        event_type: TransitionEventType,
        operation: str,
        from_state: Enum,
        to_state: Enum,
        message: str = "",
    ) -> None:
        self.transition_log.record(
            event_type=event_type,
            machine=self.name,
            operation=operation,
            from_state=str(from_state.value),
            to_state=str(to_state.value),
            message=message,
        )

    def _dispatch(self, operation: str, effect: Callable[[], Any] | None = None) -> Any:
        with self._lock:
            current = self._state
            rule = self.rule_for(operation, current)

            if rule.outcome == Outcome.REJECT or (rule.outcome == Outcome.NOTICE and self.strict):
                self._record(TransitionEventType.REJECTED, operation, current, current, rule.message)
                logger.warning("%s: %s rejected in %s: %s", self.name, operation, current.value, rule.message)
                raise IllegalStateTransitionError(operation, current, rule.message)

            if rule.outcome == Outcome.NOTICE:
                self._record(TransitionEventType.NOTICE, operation, current, current, rule.message)
                logger.warning("%s: %s ignored in %s: %s", self.name, operation, current.value, rule.message)
                return None

            result = effect() if effect is not None else None
            assert rule.target is not None
            self._state = rule.target
            self._record(TransitionEventType.ADVANCED, operation, current, rule.target)
            logger.info("%s: %s %s -> %s", self.name, operation, current.value, rule.target.value)
            return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, state={self.label})"
