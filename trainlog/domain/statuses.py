"""Closed status sets for the three state machines.

Each enum lists, for every action, the source states that allow it.
``require_transition`` is the single place a transition is accepted or
rejected, so services never compare raw strings.
"""

from enum import Enum

from trainlog.core.errors import InvalidStateTransitionError


class SessionStatus(str, Enum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.ABANDONED)


class ExerciseLogStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (ExerciseLogStatus.COMPLETED, ExerciseLogStatus.SKIPPED)


class TrackerStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (TrackerStatus.COMPLETED, TrackerStatus.ABANDONED)


SESSION_TRANSITIONS: dict[str, frozenset[SessionStatus]] = {
    "progress": frozenset({SessionStatus.STARTED}),
    "complete": frozenset({SessionStatus.STARTED, SessionStatus.IN_PROGRESS}),
    "abandon": frozenset({SessionStatus.STARTED, SessionStatus.IN_PROGRESS}),
}

EXERCISE_LOG_TRANSITIONS: dict[str, frozenset[ExerciseLogStatus]] = {
    "start": frozenset({ExerciseLogStatus.PENDING}),
    "complete": frozenset({ExerciseLogStatus.PENDING, ExerciseLogStatus.IN_PROGRESS}),
    "skip": frozenset({ExerciseLogStatus.PENDING, ExerciseLogStatus.IN_PROGRESS}),
}

TRACKER_TRANSITIONS: dict[str, frozenset[TrackerStatus]] = {
    "advance": frozenset({TrackerStatus.ACTIVE}),
    "pause": frozenset({TrackerStatus.ACTIVE}),
    "resume": frozenset({TrackerStatus.PAUSED}),
    "abandon": frozenset({TrackerStatus.ACTIVE, TrackerStatus.PAUSED}),
    # restart is an explicit override and accepted from every state
    "restart": frozenset(TrackerStatus),
}

_TABLES = {
    SessionStatus: ("workout session", SESSION_TRANSITIONS),
    ExerciseLogStatus: ("exercise log", EXERCISE_LOG_TRANSITIONS),
    TrackerStatus: ("plan progress", TRACKER_TRANSITIONS),
}


def can_transition(current: Enum, action: str) -> bool:
    _, table = _TABLES[type(current)]
    return current in table[action]


def require_transition(current: Enum, action: str) -> None:
    entity, table = _TABLES[type(current)]
    if action not in table:
        raise KeyError(f"unknown {entity} action: {action}")
    if current in table[action]:
        return
    message = None
    if getattr(current, "is_terminal", False):
        message = f"The {entity} is already finalized ({current.value}); cannot {action}"
    raise InvalidStateTransitionError(entity, current.value, action, message)
