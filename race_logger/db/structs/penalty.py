"""ISMF rulebook penalties (reference data)."""

from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import FlexibleDateTime

DISQUALIFICATION = "disqualification"

# Race type name (lower case) -> penalty column that applies to it
RACE_TYPE_COLUMNS = {
    "individual": "team_individual",
    "team": "team_individual",
    "vertical": "vertical",
    "sprint": "sprint_relay",
    "relay": "sprint_relay",
    "mixed relay": "sprint_relay",
}


class _PenaltyRules:
    __slots__ = ()

    def display_name(self) -> str:
        return f"{self.penalty_number} - {self.name}"

    def _columns(self) -> tuple[str | None, str | None, str | None]:
        return (self.team_individual, self.vertical, self.sprint_relay)

    def is_disqualification(self) -> bool:
        return DISQUALIFICATION in self._columns()

    def is_time_penalty(self) -> bool:
        return not self.is_disqualification() and any(self._columns())

    def penalty_for_race_type(self, race_type: str) -> str | None:
        column = RACE_TYPE_COLUMNS.get(str(race_type).lower())
        if column is None:
            return "N/A"
        return getattr(self, column)


class Penalty(Struct, _PenaltyRules):
    id: int
    category: str
    category_title: str
    penalty_number: str
    name: str
    category_description: str | None = None
    team_individual: str | None = None
    vertical: str | None = None
    sprint_relay: str | None = None
    notes: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class PenaltySummary(Summary, _PenaltyRules):
    id: int
    category: str
    category_title: str
    penalty_number: str
    name: str
    team_individual: str | None
    vertical: str | None
    sprint_relay: str | None
