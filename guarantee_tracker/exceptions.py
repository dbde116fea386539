"""
Typed exceptions for the guarantee tracker.

Every exception carries a machine-readable ``code``. The API layer maps them
to HTTP responses:

    TrackerError (base)
    |
    +-- ValidationError           -> 400, field-level error list
    +-- RecordNotFoundError       -> 404
    +-- ConstraintViolationError  -> 500 (treated like any storage failure)
"""

from typing import Any, Dict, List, Optional


class TrackerError(Exception):
    """Base class for all tracker errors."""

    code: str = "TRACKER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(TrackerError, ValueError):
    """One or more fields failed validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: List[Dict[str, Any]], message: str = "Invalid data"):
        self.errors = errors
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str, error_type: str = "value_error") -> "ValidationError":
        return cls([{"path": [field], "message": message, "type": error_type}])


class RecordNotFoundError(TrackerError, LookupError):
    """Referenced id does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found")


class ConstraintViolationError(TrackerError):
    """A foreign key or uniqueness rule was violated."""

    code = "CONSTRAINT_VIOLATION"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
