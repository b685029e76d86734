"""Competition structs.

Date predicates take an optional ``today`` (defaults to the current UTC date).
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import (
    COUNTRY_CODE,
    FLEXIBLE_DATE,
    FLEXIBLE_DATETIME,
    ISMF_COUNTRIES,
    CountryCode,
    FlexibleDate,
    FlexibleDateTime,
)


def _today(today: date | None) -> date:
    return today or datetime.now(timezone.utc).date()


class _CompetitionCalendar:
    __slots__ = ()

    def display_name(self) -> str:
        return f"{self.city} {self.start_date.year}"

    def date_range(self) -> str:
        return f"{self.start_date.strftime('%b %d')} - {self.end_date.strftime('%b %d, %Y')}"

    def short_date_range(self) -> str:
        if self.start_date.month == self.end_date.month:
            return f"{self.start_date.strftime('%b %d')}-{self.end_date.day}, {self.end_date.year}"
        return self.date_range()

    def is_ongoing(self, today: date | None = None) -> bool:
        return self.start_date <= _today(today) <= self.end_date

    def is_upcoming(self, today: date | None = None) -> bool:
        return self.start_date > _today(today)

    def is_past(self, today: date | None = None) -> bool:
        return self.end_date < _today(today)

    def status(self, today: date | None = None) -> str:
        if self.is_ongoing(today):
            return "ongoing"
        if self.is_upcoming(today):
            return "upcoming"
        return "past"

    def country_name(self) -> str:
        return ISMF_COUNTRIES.get(self.country, self.country)

    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def days_until_start(self, today: date | None = None) -> int:
        return (self.start_date - _today(today)).days

    def days_since_end(self, today: date | None = None) -> int:
        return (_today(today) - self.end_date).days


class Competition(Struct, _CompetitionCalendar):
    id: int
    name: str
    city: str
    place: str
    country: CountryCode
    description: str
    start_date: FlexibleDate
    end_date: FlexibleDate
    webpage_url: str
    logo_url: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class CompetitionSummary(Summary, _CompetitionCalendar):
    id: int
    name: str
    city: str
    place: str
    country: str
    start_date: date
    end_date: date
    created_at: datetime

    checks = {
        "country": COUNTRY_CODE,
        "start_date": FLEXIBLE_DATE,
        "end_date": FLEXIBLE_DATE,
        "created_at": FLEXIBLE_DATETIME,
    }
