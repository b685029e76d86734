"""Competition persistence.

Status buckets are relative to ``today``:
- upcoming: starts after today
- ongoing: today lies within [start_date, end_date]
- past: ended before today
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Select, func, or_, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Competition, CompetitionSummary

COMPETITION_STATUSES = ("upcoming", "ongoing", "past")
SORT_ORDERS = ("recent", "date", "name")

Row = models.Competition


def _today(today: date | None) -> date:
    return today or date.today()


def _status_clause(status: str, today: date):
    if status == "upcoming":
        return Row.start_date > today
    if status == "ongoing":
        return (Row.start_date <= today) & (Row.end_date >= today)
    if status == "past":
        return Row.end_date < today
    raise ValueError(f"Unknown competition status '{status}'. Valid: {', '.join(COMPETITION_STATUSES)}")


class CompetitionRepo(Repo[Competition, CompetitionSummary]):
    record_class = models.Competition
    struct_class = Competition
    summary_class = CompetitionSummary

    returns_one = ("find_by_name",)
    returns_many = ("upcoming", "ongoing", "past", "search", "by_country", "by_city", "by_date_range", "filtered")

    def base_scope(self) -> Select:
        return select(Row).order_by(Row.start_date.desc(), Row.id.desc())

    def find_by_name(self, name: str) -> Competition | None:
        return self.find_by(name=name)

    def upcoming(self, today: date | None = None) -> list[CompetitionSummary]:
        stmt = self.base_scope().where(_status_clause("upcoming", _today(today)))
        return self._many(stmt.order_by(None).order_by(Row.start_date.asc(), Row.id))

    def ongoing(self, today: date | None = None) -> list[CompetitionSummary]:
        return self._many(self.base_scope().where(_status_clause("ongoing", _today(today))))

    def past(self, today: date | None = None) -> list[CompetitionSummary]:
        return self._many(self.base_scope().where(_status_clause("past", _today(today))))

    def search(self, query: str | None) -> list[CompetitionSummary]:
        if not query or not query.strip():
            return []
        pattern = f"%{query.strip()}%"
        return self._many(
            self.base_scope().where(or_(Row.name.ilike(pattern), Row.city.ilike(pattern), Row.place.ilike(pattern)))
        )

    def by_country(self, country_code: str) -> list[CompetitionSummary]:
        return self.where(country=country_code.upper())

    def by_city(self, city: str) -> list[CompetitionSummary]:
        return self._many(self.base_scope().where(Row.city.ilike(city)))

    def by_date_range(self, start_date: date, end_date: date) -> list[CompetitionSummary]:
        """Competitions lying entirely inside [start_date, end_date], earliest first."""
        stmt = self.base_scope().where(Row.start_date >= start_date, Row.end_date <= end_date)
        return self._many(stmt.order_by(None).order_by(Row.start_date.asc(), Row.id))

    def filtered(self, status: str | None = None, sort: str = "recent", today: date | None = None) -> list[CompetitionSummary]:
        """Optional status bucket plus a sort order (recent, date or name)."""
        stmt = self.base_scope()
        if status:
            stmt = stmt.where(_status_clause(status, _today(today)))
        if sort == "date":
            stmt = stmt.order_by(None).order_by(Row.start_date.asc(), Row.id)
        elif sort == "name":
            stmt = stmt.order_by(None).order_by(Row.name.asc(), Row.id)
        elif sort != "recent":
            raise ValueError(f"Unknown sort '{sort}'. Valid: {', '.join(SORT_ORDERS)}")
        return self._many(stmt)

    def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        stmt = select(Row.id).where(Row.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Row.id != exclude_id)
        return self.session.scalar(stmt.limit(1)) is not None

    def count_by_status(self, today: date | None = None) -> dict[str, int]:
        current = _today(today)
        return {
            status: int(self.session.scalar(select(func.count()).select_from(Row).where(_status_clause(status, current))) or 0)
            for status in COMPETITION_STATUSES
        }
