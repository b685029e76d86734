"""Bib assignment of an athlete to a race.

``athlete_name`` and ``athlete_country`` come from the repository's default
scope join; the struct never holds a nested athlete.
"""

from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import BIB_NUMBER, PARTICIPATION_STATUS, BibNumber, OptionalDateTime, ParticipationStatus
from race_logger.domain.value_objects.bib_number import BibNumber as BibNumberValue

NOT_REPORTABLE_STATUSES = frozenset({"finished", "dns"})


class _ParticipationState:
    __slots__ = ()

    def bib(self) -> BibNumberValue:
        return BibNumberValue(self.bib_number)

    def bib_display(self) -> str:
        return str(self.bib_number).rjust(3, "0")

    def display_name(self) -> str:
        if self.athlete_name:
            return f"{self.bib_display()} - {self.athlete_name}"
        return self.bib_display()

    def can_report(self) -> bool:
        return bool(self.active_in_heat) and self.status not in NOT_REPORTABLE_STATUSES

    def is_dns(self) -> bool:
        return self.status == "dns"

    def is_dnf(self) -> bool:
        return self.status == "dnf"

    def is_disqualified(self) -> bool:
        return self.status == "dsq"


class RaceParticipation(Struct, _ParticipationState):
    id: int
    race_id: int
    athlete_id: int
    team_id: int | None = None
    bib_number: BibNumber
    heat: str | None = None
    active_in_heat: bool = True
    status: ParticipationStatus = "registered"
    start_time: OptionalDateTime = None
    finish_time: OptionalDateTime = None
    rank: int | None = None
    athlete_name: str | None = None
    athlete_country: str | None = None
    created_at: OptionalDateTime = None
    updated_at: OptionalDateTime = None

    def is_team_race(self) -> bool:
        return self.team_id is not None

    def is_started(self) -> bool:
        return self.start_time is not None

    def is_finished(self) -> bool:
        return self.status == "finished" and self.finish_time is not None


@summary_struct
class RaceParticipationSummary(Summary, _ParticipationState):
    id: int
    race_id: int
    athlete_id: int
    bib_number: int
    status: str
    active_in_heat: bool
    athlete_name: str | None

    checks = {"bib_number": BIB_NUMBER, "status": PARTICIPATION_STATUS}
