"""Race scheduling and display rules.

Time-dependent predicates take an optional ``now`` so callers (and tests)
can pin the clock; it defaults to the current UTC time.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

STAGE_ABBREVIATIONS = {
    "Qualification": "Q",
    "Heat": "H",
    "Quarterfinal": "QF",
    "Semifinal": "SF",
    "Final": "F",
}

GENDER_CATEGORY_LABELS = {
    "M": "Men",
    "W": "Women",
    "MM": "Men's Team",
    "WW": "Women's Team",
    "MW": "Mixed Team",
}

TEAM_CATEGORIES = frozenset({"MM", "WW", "MW"})
INDIVIDUAL_CATEGORIES = frozenset({"M", "W"})


def build_stage_name(stage_type: str, heat_number: int | None) -> str:
    """Stage label stored on the race: "Final" or "Heat 2"."""
    if heat_number:
        return f"{stage_type} {heat_number}"
    return stage_type


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


class RaceRules:
    __slots__ = ()

    def is_scheduled(self) -> bool:
        return self.status == "scheduled"

    def is_in_progress(self) -> bool:
        return self.status == "in_progress"

    def is_completed(self) -> bool:
        return self.status == "completed"

    def is_cancelled(self) -> bool:
        return self.status == "cancelled"

    def is_started(self) -> bool:
        return not self.is_scheduled()

    def can_start(self, now: datetime | None = None) -> bool:
        return self.is_scheduled() and self.scheduled_at is not None and self.scheduled_at <= _now(now)

    def can_report(self) -> bool:
        return self.is_in_progress()

    def can_edit(self) -> bool:
        return not self.is_completed()

    def is_upcoming(self, now: datetime | None = None) -> bool:
        return self.is_scheduled() and self.scheduled_at is not None and self.scheduled_at > _now(now)

    def is_scheduled_today(self, today: date | None = None) -> bool:
        if self.scheduled_at is None:
            return False
        return self.scheduled_at.date() == (today or datetime.now(timezone.utc).date())

    def minutes_until_start(self, now: datetime | None = None) -> int:
        if self.scheduled_at is None or self.is_started():
            return 0
        return int((self.scheduled_at - _now(now)).total_seconds() // 60)

    def stage_abbrev(self) -> str:
        abbrev = STAGE_ABBREVIATIONS.get(self.stage_type, self.stage_type[:1].upper())
        return f"{abbrev}{self.heat_number}" if self.heat_number else abbrev

    def full_stage_name(self) -> str:
        return build_stage_name(self.stage_type.title(), self.heat_number)

    def short_name(self) -> str:
        return f"{(self.race_type_name or 'Race').title()} {self.stage_abbrev()}"

    def gender_category_display(self) -> str:
        return GENDER_CATEGORY_LABELS.get(self.gender_category, self.gender_category)

    def is_team_race(self) -> bool:
        return self.gender_category in TEAM_CATEGORIES

    def is_individual_race(self) -> bool:
        return self.gender_category in INDIVIDUAL_CATEGORIES

    def status_text(self) -> str:
        return self.status.replace("_", " ").title()

    def formatted_scheduled_time(self) -> str:
        if self.scheduled_at is None:
            return "Not scheduled"
        return self.scheduled_at.strftime("%H:%M")
