"""Race persistence.

The default scope joins the race type and competition names so every read
carries them without a second query.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Select, func, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Race, RaceSummary

Row = models.Race


class RaceRepo(Repo[Race, RaceSummary]):
    record_class = models.Race
    struct_class = Race
    summary_class = RaceSummary

    returns_many = (
        "for_competition",
        "by_race_type",
        "scheduled",
        "in_progress",
        "completed",
        "auto_startable",
        "auto_completable",
    )

    def base_scope(self) -> Select:
        return (
            select(
                Row,
                models.RaceType.name.label("race_type_name"),
                models.Competition.name.label("competition_name"),
            )
            .outerjoin(models.RaceType, Row.race_type_id == models.RaceType.id)
            .outerjoin(models.Competition, Row.competition_id == models.Competition.id)
            .order_by(Row.id)
        )

    def _ordered(self, stmt: Select, *order: object) -> Select:
        return stmt.order_by(None).order_by(*order, Row.id)

    def for_competition(self, competition_id: int) -> list[RaceSummary]:
        stmt = self.base_scope().where(Row.competition_id == competition_id)
        return self._many(self._ordered(stmt, Row.race_type_id, Row.position, Row.scheduled_at))

    def by_race_type(self, competition_id: int, race_type_id: int) -> list[RaceSummary]:
        stmt = self.base_scope().where(Row.competition_id == competition_id, Row.race_type_id == race_type_id)
        return self._many(self._ordered(stmt, Row.position, Row.scheduled_at))

    def scheduled(self) -> list[RaceSummary]:
        return self._many(self._ordered(self.base_scope().where(Row.status == "scheduled"), Row.scheduled_at))

    def in_progress(self) -> list[RaceSummary]:
        return self._many(self._ordered(self.base_scope().where(Row.status == "in_progress"), Row.scheduled_at))

    def completed(self) -> list[RaceSummary]:
        return self._many(self._ordered(self.base_scope().where(Row.status == "completed"), Row.scheduled_at.desc()))

    def auto_startable(self, now: datetime | None = None) -> list[RaceSummary]:
        """Scheduled races whose start time has passed."""
        now = now or datetime.now(timezone.utc)
        stmt = self.base_scope().where(
            Row.status == "scheduled",
            Row.scheduled_at.is_not(None),
            Row.scheduled_at <= now,
        )
        return self._many(self._ordered(stmt, Row.scheduled_at))

    def auto_completable(self, today: date | None = None) -> list[RaceSummary]:
        """In-progress races of competitions that ended before today."""
        today = today or date.today()
        stmt = self.base_scope().where(Row.status == "in_progress", models.Competition.end_date < today)
        return self._many(stmt)

    def max_position(self, competition_id: int, race_type_id: int) -> int | None:
        """Highest position within one competition + race type, None when empty."""
        stmt = select(func.max(Row.position)).where(Row.competition_id == competition_id, Row.race_type_id == race_type_id)
        return self.session.scalar(stmt)
