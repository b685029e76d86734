"""Incident status value object with the one-way officialization rule."""

from __future__ import annotations

from race_logger.domain.types import INCIDENT_STATUS, INCIDENT_STATUSES

UNOFFICIAL = "unofficial"
OFFICIAL = "official"

# status -> statuses it may move to
_TRANSITIONS: dict[str, frozenset[str]] = {
    UNOFFICIAL: frozenset({OFFICIAL}),
    OFFICIAL: frozenset(),
}


class IncidentStatusValue:
    """Wraps an incident status string.

    Official is terminal: an incident never returns to unofficial.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        result = INCIDENT_STATUS.validate(value)
        if not result.ok:
            raise ValueError(f"Invalid incident status {value!r}: {result.message}")
        self._value: str = result.value

    @classmethod
    def unofficial_status(cls) -> IncidentStatusValue:
        return cls(UNOFFICIAL)

    @classmethod
    def official_status(cls) -> IncidentStatusValue:
        return cls(OFFICIAL)

    @staticmethod
    def all_statuses() -> tuple[str, ...]:
        return INCIDENT_STATUSES

    @property
    def value(self) -> str:
        return self._value

    @property
    def unofficial(self) -> bool:
        return self._value == UNOFFICIAL

    @property
    def official(self) -> bool:
        return self._value == OFFICIAL

    def can_transition_to(self, new_status: str | IncidentStatusValue) -> bool:
        target = new_status.value if isinstance(new_status, IncidentStatusValue) else new_status
        return target in _TRANSITIONS[self._value]

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"IncidentStatusValue({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IncidentStatusValue):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        return False

    def __hash__(self) -> int:
        return hash(self._value)
