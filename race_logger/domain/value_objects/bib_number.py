"""Bib number value object.

Callers compare bib numbers coming from structs against raw integers from
query results, so equality and ordering accept both forms.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from race_logger.domain.types import BIB_NUMBER


@total_ordering
class BibNumber:
    """Validated race bib number (1..9999)."""

    __slots__ = ("_value",)

    def __init__(self, value: Any):
        result = BIB_NUMBER.validate(value)
        if not result.ok:
            raise ValueError(f"Invalid bib number {value!r}: {result.message}")
        self._value: int = result.value

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value).rjust(4, "0")

    def __repr__(self) -> str:
        return f"BibNumber({self._value})"

    @staticmethod
    def _raw(other: Any) -> int | None:
        if isinstance(other, BibNumber):
            return other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __eq__(self, other: object) -> bool:
        raw = self._raw(other)
        if raw is None:
            return False
        return self._value == raw

    def __lt__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value < raw

    def __hash__(self) -> int:
        return hash(self._value)
