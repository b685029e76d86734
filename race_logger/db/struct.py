"""Immutable record structs.

Two tiers per entity:

- ``Struct`` (full): every persisted attribute, type-checked by pydantic,
  carries the entity's predicate methods. Built for single-record reads and
  writes.
- ``Summary``: a frozen, slotted dataclass holding a projection of the full
  struct's fields. Built for collection reads.

Both raise ConstructionError naming every offending field; a half-valid
struct is never returned.
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from race_logger.core.errors import ConstructionError
from race_logger.domain.types import SemanticType

S = TypeVar("S", bound="Struct")
SummaryT = TypeVar("SummaryT", bound="Summary")


def _field_errors(error: ValidationError) -> dict[str, list[str]]:
    field_errors: dict[str, list[str]] = {}
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "__root__"
        message = detail.get("msg", "is invalid")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        field_errors.setdefault(location, []).append(message)
    return field_errors


class Struct(BaseModel):
    """Full record struct."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConstructionError(type(self).__name__, _field_errors(e)) from e

    @classmethod
    def build(cls: type[S], attributes: Mapping[str, Any]) -> S:
        return cls(**dict(attributes))

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(cls.model_fields)

    def with_changes(self: S, **changes: Any) -> S:
        """Return a new, re-validated struct with ``changes`` applied."""
        return type(self)(**{**self.model_dump(), **changes})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    def to_param(self) -> str:
        return str(getattr(self, "id"))


class Summary:
    """Base for summary structs.

    Subclasses are declared with ``@summary_struct``. ``checks`` maps field
    names to semantic types validated (and normalised) at construction; None
    values are left alone.
    """

    __slots__ = ()

    checks: ClassVar[dict[str, SemanticType]] = {}

    def __post_init__(self) -> None:
        field_errors: dict[str, list[str]] = {}
        for name, semantic_type in self.checks.items():
            value = getattr(self, name)
            if value is None:
                continue
            result = semantic_type.validate(value)
            if result.ok:
                object.__setattr__(self, name, result.value)
            else:
                field_errors.setdefault(name, []).append(result.message or "is invalid")
        if field_errors:
            raise ConstructionError(type(self).__name__, field_errors)

    @classmethod
    def fields(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))  # type: ignore[arg-type]

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(cls.fields())

    @classmethod
    def build(cls: type[SummaryT], attributes: Mapping[str, Any]) -> SummaryT:
        """Build from a mapping that must hold exactly the summary's fields."""
        expected = cls.field_names()
        field_errors: dict[str, list[str]] = {}
        for name in expected - set(attributes):
            field_errors[name] = ["is missing"]
        for name in set(attributes) - expected:
            field_errors[name] = ["is not a field of this summary"]
        if field_errors:
            raise ConstructionError(cls.__name__, field_errors)
        return cls(**dict(attributes))

    @classmethod
    def from_struct(cls: type[SummaryT], struct: Struct) -> SummaryT:
        data = struct.model_dump()
        return cls.build({name: data[name] for name in cls.fields()})

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.fields()}

    def to_param(self) -> str:
        return str(getattr(self, "id"))


def summary_struct(cls: type[SummaryT]) -> type[SummaryT]:
    """Turn a Summary subclass into a frozen, slotted dataclass.

    Wrong argument sets surface as ConstructionError rather than TypeError.
    """
    cls = dataclasses.dataclass(frozen=True, slots=True)(cls)
    generated_init = cls.__init__

    @functools.wraps(generated_init)
    def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
        try:
            generated_init(self, *args, **kwargs)
        except TypeError as e:
            raise ConstructionError(cls.__name__, {"__init__": [str(e)]}) from e

    cls.__init__ = __init__  # type: ignore[method-assign]
    return cls
