"""Validation contract machinery.

A contract validates a caller-supplied attribute map before any write:

1. every declared param is coerced and checked on its own (pydantic
   TypeAdapter); all field errors are collected, never fail-fast;
2. undeclared keys are dropped from the normalised values;
3. ``@rule`` methods run only when every key they name passed step 1;
4. existence checks go through injected lookups so a contract can be
   exercised without a database.

Invalid input never raises. Callers inspect the returned ValidationResult.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from pydantic import TypeAdapter, ValidationError

MISSING_MESSAGE = "is missing"
FILLED_MESSAGE = "must be filled"

Lookup = Callable[[Any], bool]


class FailureKind(str, Enum):
    """Where a contract failure came from."""

    FIELD = "field"  # type/format/range problem on one field
    CROSS_FIELD = "cross_field"  # individually valid fields break a business rule together
    REFERENTIAL = "referential"  # referenced id does not exist


@dataclass(frozen=True)
class ContractFailure:
    field: str
    message: str
    kind: FailureKind = FailureKind.FIELD


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of Contract.call.

    Attributes:
        values: Normalised attributes (declared keys only)
        failures: Every failure found, in discovery order
    """

    values: dict[str, Any] = field(default_factory=dict)
    failures: tuple[ContractFailure, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def failure(self) -> bool:
        return bool(self.failures)

    @property
    def errors(self) -> dict[str, list[str]]:
        """Field name -> error messages."""
        grouped: dict[str, list[str]] = {}
        for item in self.failures:
            grouped.setdefault(item.field, []).append(item.message)
        return grouped

    def errors_for(self, field_name: str) -> list[str]:
        return [item.message for item in self.failures if item.field == field_name]

    def kinds_for(self, field_name: str) -> set[FailureKind]:
        return {item.kind for item in self.failures if item.field == field_name}

    def to_dict(self) -> dict[str, Any]:
        return dict(self.values)


def _pydantic_messages(error: ValidationError) -> list[str]:
    messages = []
    for detail in error.errors():
        message = detail.get("msg", "is invalid")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        messages.append(message)
    return messages


class Param:
    """Declaration of one contract input.

    Args:
        type_: Python/pydantic type the value is coerced to
        required: Whether the key must be present
        filled: Reject None and empty strings (required keys are always filled)
        each: Nested contract class applied to every item of a list value
        min_length/max_length: Bounds on len(value)
        gt/gte/lte: Numeric bounds
    """

    def __init__(
        self,
        type_: Any,
        *,
        required: bool,
        filled: bool | None = None,
        each: type[Contract] | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        gt: int | None = None,
        gte: int | None = None,
        lte: int | None = None,
    ):
        self.type_ = type_
        self.required = required
        self.filled = required if filled is None else filled
        self.each = each
        self.min_length = min_length
        self.max_length = max_length
        self.gt = gt
        self.gte = gte
        self.lte = lte
        self._adapter: TypeAdapter[Any] = TypeAdapter(type_)

    def check(self, name: str, value: Any, lookups: Mapping[str, Lookup]) -> tuple[Any, list[ContractFailure]]:
        """Coerce and check one value. Returns (normalised, failures)."""
        if value is None or (self.filled and isinstance(value, str) and not value):
            if self.filled:
                return None, [ContractFailure(name, FILLED_MESSAGE)]
            return None, []

        if self.each is not None:
            return self._check_each(name, value, self.each, lookups)

        try:
            coerced = self._adapter.validate_python(value)
        except ValidationError as e:
            return None, [ContractFailure(name, message) for message in _pydantic_messages(e)]

        return coerced, [ContractFailure(name, message) for message in self._bound_messages(coerced)]

    def _check_each(
        self, name: str, value: Any, each: type[Contract], lookups: Mapping[str, Lookup]
    ) -> tuple[Any, list[ContractFailure]]:
        if not isinstance(value, (list, tuple)):
            return None, [ContractFailure(name, "must be an array")]

        items: list[dict[str, Any]] = []
        failures: list[ContractFailure] = []
        nested = each(lookups=lookups)
        for index, item in enumerate(value):
            prefix = f"{name}.{index}"
            if not isinstance(item, Mapping):
                failures.append(ContractFailure(prefix, "must be an object"))
                continue
            result = nested.call(item, prefix=prefix)
            items.append(result.values)
            failures.extend(result.failures)
        return items, failures

    def _bound_messages(self, value: Any) -> list[str]:
        messages = []
        if self.min_length is not None and len(value) < self.min_length:
            messages.append(f"must be at least {self.min_length} characters")
        if self.max_length is not None and len(value) > self.max_length:
            messages.append(f"must be at most {self.max_length} characters")
        if self.gt is not None and value <= self.gt:
            messages.append(f"must be greater than {self.gt}")
        if self.gte is not None and value < self.gte:
            messages.append(f"must be greater than or equal to {self.gte}")
        if self.lte is not None and value > self.lte:
            messages.append(f"must be less than or equal to {self.lte}")
        return messages


def required(type_: Any, **options: Any) -> Param:
    return Param(type_, required=True, **options)


def optional(type_: Any, **options: Any) -> Param:
    return Param(type_, required=False, **options)


def rule(*keys: str, kind: FailureKind | None = None) -> Callable[[Callable[..., None]], Callable[..., None]]:
    """Mark a contract method as a rule over ``keys``.

    The method receives a RuleContext. Single-key rules report FIELD
    failures by default, multi-key rules CROSS_FIELD.
    """
    if not keys:
        raise ValueError("rule() needs at least one key")

    def decorator(func: Callable[..., None]) -> Callable[..., None]:
        func._rule_keys = keys  # type: ignore[attr-defined]
        func._rule_kind = kind or (FailureKind.FIELD if len(keys) == 1 else FailureKind.CROSS_FIELD)  # type: ignore[attr-defined]
        return func

    return decorator


class RuleContext:
    """What a rule sees: normalised values, a failure sink and the lookups."""

    def __init__(self, values: Mapping[str, Any], lookups: Mapping[str, Lookup], kind: FailureKind, prefix: str):
        self.values = values
        self._lookups = lookups
        self._kind = kind
        self._prefix = prefix
        self.failures: list[ContractFailure] = []

    def has(self, key: str) -> bool:
        return self.values.get(key) is not None

    def failure(self, key: str, message: str, kind: FailureKind | None = None) -> None:
        name = f"{self._prefix}.{key}" if self._prefix else key
        self.failures.append(ContractFailure(name, message, kind or self._kind))

    def exists(self, lookup_name: str, identifier: Any) -> bool:
        """Ask an injected lookup whether ``identifier`` exists.

        Contracts built without that lookup treat the reference as present.
        """
        lookup = self._lookups.get(lookup_name)
        if lookup is None:
            return True
        return bool(lookup(identifier))

    def require_existing(self, key: str, lookup_name: str, message: str) -> None:
        if self.has(key) and not self.exists(lookup_name, self.values[key]):
            self.failure(key, message, FailureKind.REFERENTIAL)


class Contract:
    """Base class for input contracts.

    Subclasses declare ``params`` and decorate rule methods with ``@rule``.

    Example:
        class AuthenticateUser(Contract):
            params = {"email": required(str), "password": required(str)}

            @rule("password")
            def password_length(self, ctx):
                if len(ctx.values["password"]) < 8:
                    ctx.failure("password", "must be at least 8 characters")
    """

    params: ClassVar[dict[str, Param]] = {}
    _rules: ClassVar[list[Callable[..., None]]] = []

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        rules = [r for r in getattr(cls, "_rules", []) if r.__name__ not in cls.__dict__]
        rules.extend(value for value in cls.__dict__.values() if callable(value) and hasattr(value, "_rule_keys"))
        cls._rules = rules

    def __init__(self, lookups: Mapping[str, Lookup] | None = None):
        self.lookups: dict[str, Lookup] = dict(lookups or {})

    def __call__(self, attributes: Mapping[str, Any]) -> ValidationResult:
        return self.call(attributes)

    def call(self, attributes: Mapping[str, Any], prefix: str = "") -> ValidationResult:
        values: dict[str, Any] = {}
        failures: list[ContractFailure] = []

        for name, param in self.params.items():
            qualified = f"{prefix}.{name}" if prefix else name
            if name not in attributes:
                if param.required:
                    failures.append(ContractFailure(qualified, MISSING_MESSAGE))
                continue
            value, param_failures = param.check(qualified, attributes[name], self.lookups)
            failures.extend(param_failures)
            if not param_failures:
                values[name] = value

        failed_keys = {self._local_key(item.field, prefix) for item in failures}
        for rule_method in self._rules:
            keys = rule_method._rule_keys  # type: ignore[attr-defined]
            if any(key in failed_keys for key in keys):
                continue
            ctx = RuleContext(values, self.lookups, rule_method._rule_kind, prefix)  # type: ignore[attr-defined]
            rule_method(self, ctx)
            failures.extend(ctx.failures)

        return ValidationResult(values=values, failures=tuple(failures))

    @staticmethod
    def _local_key(field_name: str, prefix: str) -> str:
        if prefix and field_name.startswith(prefix + "."):
            field_name = field_name[len(prefix) + 1 :]
        return field_name.split(".", 1)[0]
