"""
Typed Exception Hierarchy for the Stock Kernel.

Every error raised by the inventory engine is a subclass of
``StockKernelError`` and carries a class-level ``code`` for machine-readable
identification, plus structured attributes describing what went wrong.
Callers catch by type, never by parsing messages:

    try:
        store.update(record_id, {"quantity": -1})
    except ValidationError as e:
        form.show_error(e.field, e.reason)

Hierarchy:

    StockKernelError (base)
    |
    +-- ValidationError
    |   +-- DuplicateRecordError
    |
    +-- NotFoundError
    |
    +-- InvalidQueryError
    |
    +-- PersistenceError

Error codes:

Code               | When raised
-------------------|--------------------------------------------------
VALIDATION_ERROR   | A field violates a record invariant on add/update
DUPLICATE_RECORD   | Initial state or bulk load repeats an id
RECORD_NOT_FOUND   | Operation references an id not in the store
INVALID_QUERY      | Unknown sort field/direction, filter value, dimension
PERSISTENCE_ERROR  | Persistence collaborator failed; store left unchanged
"""

from typing import Any


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a `code` class attribute.
    """

    code: str = "STOCK_KERNEL_ERROR"


class ValidationError(StockKernelError):
    """A record field violates a stated invariant."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str, value: Any = None):
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"Invalid {field}: {reason}")


class DuplicateRecordError(ValidationError):
    """The same record id appears more than once."""

    code: str = "DUPLICATE_RECORD"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__("id", f"duplicate record id {record_id}", record_id)


class NotFoundError(StockKernelError):
    """Record with given ID was not found."""

    code: str = "RECORD_NOT_FOUND"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class InvalidQueryError(StockKernelError):
    """A view, sort or report request names something that does not exist."""

    code: str = "INVALID_QUERY"

    def __init__(self, parameter: str, value: Any, allowed: tuple[str, ...]):
        self.parameter = parameter
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid {parameter} {value!r}; expected one of {', '.join(allowed)}"
        )


class PersistenceError(StockKernelError):
    """The persistence collaborator could not save the new state."""

    code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Persistence failed during {operation}: {detail}")
