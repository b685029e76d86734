"""Race participation persistence.

The default scope joins the athlete so every row carries ``athlete_name``
("First Last") and ``athlete_country``.
"""

from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo, WriteResult
from race_logger.db.structs import RaceParticipation, RaceParticipationSummary

Row = models.RaceParticipation

INACTIVE_STATUSES = ("dns", "finished")


class RaceParticipationRepo(Repo[RaceParticipation, RaceParticipationSummary]):
    record_class = models.RaceParticipation
    struct_class = RaceParticipation
    summary_class = RaceParticipationSummary

    returns_one = ("find_by_bib", "find_by_athlete")
    returns_many = ("for_race", "active", "by_status")

    def base_scope(self) -> Select:
        return (
            select(
                Row,
                (models.Athlete.first_name + " " + models.Athlete.last_name).label("athlete_name"),
                models.Athlete.country.label("athlete_country"),
            )
            .join(models.Athlete, Row.athlete_id == models.Athlete.id)
            .order_by(Row.race_id, Row.bib_number)
        )

    def find_by_bib(self, race_id: int, bib_number: int) -> RaceParticipation | None:
        return self.find_by(race_id=race_id, bib_number=int(bib_number))

    def find_by_athlete(self, race_id: int, athlete_id: int) -> RaceParticipation | None:
        return self.find_by(race_id=race_id, athlete_id=athlete_id)

    def create_for_import(self, race_id: int, athlete_id: int, bib_number: int) -> WriteResult[RaceParticipation]:
        """Register an athlete under a bib, refusing a taken athlete or bib slot."""
        if self.exists(race_id=race_id, athlete_id=athlete_id):
            return WriteResult(error="Athlete already assigned to this race")
        if self.exists(race_id=race_id, bib_number=int(bib_number)):
            return WriteResult(error=f"Bib number {int(bib_number)} already assigned")
        return self.try_create(
            {
                "race_id": race_id,
                "athlete_id": athlete_id,
                "bib_number": int(bib_number),
                "status": "registered",
                "active_in_heat": True,
            }
        )

    def for_race(self, race_id: int) -> list[RaceParticipationSummary]:
        return self.where(race_id=race_id)

    def active(self, race_id: int) -> list[RaceParticipationSummary]:
        """Participants still reportable: active in the heat, not DNS or finished."""
        stmt = self.base_scope().where(
            Row.race_id == race_id,
            Row.active_in_heat.is_(True),
            Row.status.not_in(INACTIVE_STATUSES),
        )
        return self._many(stmt)

    def by_status(self, race_id: int, status: str) -> list[RaceParticipationSummary]:
        return self.where(race_id=race_id, status=status)
