"""Business-rule failures raised by the execution and progression services.

Every error carries a stable ``code`` so API clients can tell a locked
workout apart from a generic validation problem, plus a ``context`` dict
naming the entity, its state or the offending field.
"""

from typing import Any


class DomainError(Exception):
    code = "domain_error"
    status_code = 400

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, "context": self.context}


class NotFoundError(DomainError):
    """Missing record, or one that belongs to another trainee."""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found", entity=entity, id=str(entity_id))


class InvalidStateTransitionError(DomainError):
    code = "invalid_state_transition"
    status_code = 409

    def __init__(self, entity: str, current: str, action: str, message: str | None = None):
        super().__init__(
            message or f"Cannot {action} {entity} in state '{current}'",
            entity=entity,
            current_state=current,
            action=action,
        )


class ImmutabilityViolationError(DomainError):
    code = "workout_locked"
    status_code = 423

    def __init__(self, session_id: Any, action: str):
        super().__init__(
            "This workout is locked: logs of a completed session cannot be changed",
            session_id=str(session_id),
            action=action,
        )


class DomainValidationError(DomainError):
    code = "validation_error"
    status_code = 422

    def __init__(self, message: str, field: str | None = None, **context: Any):
        if field is not None:
            context["field"] = field
        super().__init__(message, **context)


class ConflictError(DomainError):
    code = "conflict"
    status_code = 409
