"""Operation outcomes.

Every operation returns either Success(value) or Failure. A Failure carries
a machine-readable ``code``, a human message and, for validation problems,
the field -> messages map produced by the contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from race_logger.domain.contracts.base import ValidationResult


@dataclass(frozen=True)
class Success:
    value: Any = None

    @property
    def success(self) -> bool:
        return True

    @property
    def failure(self) -> bool:
        return False


@dataclass(frozen=True)
class Failure:
    """Why an operation did not complete.

    Attributes:
        code: Stable identifier (validation_failed, not_found, forbidden, ...)
        message: Human readable summary
        errors: Field name -> messages, for validation failures
        value: Partial outcome, when the operation has one to report
    """

    code: str
    message: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict)
    value: Any = None

    @property
    def success(self) -> bool:
        return False

    @property
    def failure(self) -> bool:
        return True

    @classmethod
    def from_validation(cls, validation: ValidationResult) -> Failure:
        fields = ", ".join(sorted(validation.errors))
        return cls(code="validation_failed", message=f"Invalid attributes: {fields}", errors=validation.errors)


OperationResult = Union[Success, Failure]
