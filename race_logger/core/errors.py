"""Error types for the race logger core.

Contract failures (field, cross-field and referential problems) are never
raised; they travel inside a ValidationResult. The exceptions below cover the
cases a caller cannot correct by editing input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


class RaceLoggerError(Exception):
    """Base class for all race logger errors."""


class NotFoundError(RaceLoggerError):
    """Raised when a lookup that promises existence finds nothing."""

    def __init__(self, entity: str, identifier: object, message: str | None = None):
        self.entity = entity
        self.identifier = identifier
        self.message = message or f"{entity} with id={identifier!r} not found"
        super().__init__(self.message)


class ConstructionError(RaceLoggerError, ValueError):
    """Raised when a struct cannot be built from the given attributes.

    This is a developer error: contracts should have rejected the input
    before it reached storage. Every offending field is named.
    """

    def __init__(self, struct_name: str, field_errors: Mapping[str, Sequence[str]]):
        self.struct_name = struct_name
        self.field_errors: dict[str, list[str]] = {field: list(messages) for field, messages in field_errors.items()}
        details = "; ".join(f"{field}: {', '.join(messages)}" for field, messages in self.field_errors.items())
        self.message = f"Cannot build {struct_name}: {details}"
        super().__init__(self.message)

    @property
    def fields(self) -> list[str]:
        return list(self.field_errors)


class RecordInvalidError(RaceLoggerError, ValueError):
    """Raised by record-level validation hooks before a row is written."""

    def __init__(self, record_name: str, field: str, message: str):
        self.record_name = record_name
        self.field = field
        self.message = f"{record_name}.{field} {message}"
        super().__init__(self.message)


class StorageFailure(RaceLoggerError):
    """Infrastructure failure while talking to the relational store.

    Never retried by repositories; the caller decides what to do.
    """

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        self.message = f"Storage failure during {operation}: {type(cause).__name__}: {cause}"
        super().__init__(self.message)
