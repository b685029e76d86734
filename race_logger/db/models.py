from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from race_logger.core.errors import RecordInvalidError
from race_logger.domain.types import (
    COURSE_SEGMENTS,
    DECISION_TYPES,
    GENDER_CATEGORIES,
    GENDERS,
    INCIDENT_STATUSES,
    PARTICIPATION_STATUSES,
    RACE_STATUSES,
    ROLE_NAMES,
    SEGMENT_POSITIONS,
    STAGE_TYPES,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class RecordValidationMixin:
    """Record-level presence/inclusion checks run when attributes are assigned.

    Failures raise RecordInvalidError, which repositories treat as a
    recoverable write failure.
    """

    def _require(self, key: str, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise RecordInvalidError(type(self).__name__, key, "can't be blank")
        return value

    def _require_in(self, key: str, value: Any, allowed: tuple[str, ...]) -> Any:
        self._require(key, value)
        if value not in allowed:
            raise RecordInvalidError(type(self).__name__, key, f"is not included in the list ({', '.join(allowed)})")
        return value


class Role(TimestampMixin, RecordValidationMixin, Base):
    """Referee/operator role. Names come from a closed set."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)

    @validates("name")
    def validate_name(self, key: str, value: str) -> str:
        return self._require_in(key, value, ROLE_NAMES)


class User(TimestampMixin, RecordValidationMixin, Base):
    """User account.

    Stores:
    - email_address: unique login identifier
    - password_digest: bcrypt hash (passlib), never exposed through structs
    - admin: full access flag, independent of role
    - role_id: optional referee/operator role
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email_address: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    password_digest: Mapped[str] = mapped_column(String, nullable=False)
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    role_id: Mapped[int | None] = mapped_column(ForeignKey("roles.id"), nullable=True, index=True)

    @validates("email_address", "password_digest")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)


class UserSession(TimestampMixin, Base):
    """Persisted sign-in (table ``sessions``)."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String, nullable=True)


class MagicLink(TimestampMixin, RecordValidationMixin, Base):
    __tablename__ = "magic_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @validates("token")
    def validate_token(self, key: str, value: str) -> str:
        return self._require(key, value)


class Competition(TimestampMixin, RecordValidationMixin, Base):
    __tablename__ = "competitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    city: Mapped[str] = mapped_column(String, nullable=False)
    place: Mapped[str] = mapped_column(String, nullable=False)
    country: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    webpage_url: Mapped[str] = mapped_column(String, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (Index("idx_competitions_start_end", "start_date", "end_date"),)

    @validates("name", "city", "place", "country", "description", "webpage_url")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)


class RaceType(TimestampMixin, RecordValidationMixin, Base):
    """Race format (Individual, Sprint, Vertical, Team, Mixed Relay)."""

    __tablename__ = "race_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @validates("name")
    def validate_name(self, key: str, value: str) -> str:
        return self._require(key, value)


class Race(TimestampMixin, RecordValidationMixin, Base):
    """One race (stage/heat) of a competition.

    Constraints:
    - position is unique within (competition_id, race_type_id); it orders the
      stages of one race type inside a competition
    """

    __tablename__ = "races"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    competition_id: Mapped[int] = mapped_column(ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True)
    race_type_id: Mapped[int] = mapped_column(ForeignKey("race_types.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    stage_type: Mapped[str] = mapped_column(String, nullable=False)
    stage_name: Mapped[str] = mapped_column(String, nullable=False)
    heat_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender_category: Mapped[str] = mapped_column(String, nullable=False, default="M", index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String, nullable=False, default="scheduled", index=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("competition_id", "race_type_id", "position", name="uq_races_competition_type_position"),
    )

    @validates("name", "stage_name")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)

    @validates("stage_type")
    def validate_stage_type(self, key: str, value: str) -> str:
        return self._require_in(key, value, STAGE_TYPES)

    @validates("gender_category")
    def validate_gender_category(self, key: str, value: str) -> str:
        return self._require_in(key, value, GENDER_CATEGORIES)

    @validates("status")
    def validate_status(self, key: str, value: str) -> str:
        return self._require_in(key, value, RACE_STATUSES)


class _LocationColumns(RecordValidationMixin):
    name: Mapped[str] = mapped_column(String, nullable=False)
    course_segment: Mapped[str] = mapped_column(String, nullable=False)
    segment_position: Mapped[str] = mapped_column(String, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_standard: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    color_code: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @validates("name")
    def validate_name(self, key: str, value: str) -> str:
        return self._require(key, value)

    @validates("course_segment")
    def validate_course_segment(self, key: str, value: str) -> str:
        return self._require_in(key, value, COURSE_SEGMENTS)

    @validates("segment_position")
    def validate_segment_position(self, key: str, value: str) -> str:
        return self._require_in(key, value, SEGMENT_POSITIONS)


class RaceTypeLocationTemplate(TimestampMixin, _LocationColumns, Base):
    """Standard location of a race type, copied into each new race."""

    __tablename__ = "race_type_location_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_type_id: Mapped[int] = mapped_column(ForeignKey("race_types.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        Index("idx_location_templates_type_order", "race_type_id", "display_order"),
        Index("idx_location_templates_type_name", "race_type_id", "name"),
    )


class RaceLocation(TimestampMixin, _LocationColumns, Base):
    """Camera/observer location of one race."""

    __tablename__ = "race_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        Index("idx_race_locations_race_order", "race_id", "display_order"),
        Index("idx_race_locations_race_name", "race_id", "name"),
    )


class Athlete(TimestampMixin, RecordValidationMixin, Base):
    __tablename__ = "athletes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    gender: Mapped[str] = mapped_column(String(1), nullable=False)
    country: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    # NULLs never collide on a unique column, so unlicensed athletes are fine
    license_number: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)

    __table_args__ = (Index("idx_athletes_name_gender_country", "first_name", "last_name", "gender", "country"),)

    @validates("first_name", "last_name", "country")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)

    @validates("gender")
    def validate_gender(self, key: str, value: str) -> str:
        return self._require_in(key, value, GENDERS)


class Team(TimestampMixin, Base):
    """Two-athlete team entry for team/relay races."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_1_id: Mapped[int] = mapped_column(ForeignKey("athletes.id"), nullable=False, index=True)
    athlete_2_id: Mapped[int | None] = mapped_column(ForeignKey("athletes.id"), nullable=True, index=True)
    bib_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    team_type: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (UniqueConstraint("race_id", "bib_number", name="uq_teams_race_bib"),)


class RaceParticipation(TimestampMixin, RecordValidationMixin, Base):
    """Bib assignment of an athlete in a race.

    Constraints:
    - Unique (race_id, bib_number): one bib per race
    - Unique (race_id, athlete_id): an athlete enters a race once
    """

    __tablename__ = "race_participations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id"), nullable=False, index=True)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id"), nullable=True, index=True)
    bib_number: Mapped[int] = mapped_column(Integer, nullable=False)
    heat: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    active_in_heat: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="registered", index=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finish_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("race_id", "bib_number", name="uq_participations_race_bib"),
        UniqueConstraint("race_id", "athlete_id", name="uq_participations_race_athlete"),
    )

    @validates("bib_number")
    def validate_bib_number(self, key: str, value: int) -> int:
        return self._require(key, value)

    @validates("status")
    def validate_status(self, key: str, value: str) -> str:
        return self._require_in(key, value, PARTICIPATION_STATUSES)


class Penalty(TimestampMixin, RecordValidationMixin, Base):
    """ISMF rulebook penalty (reference data)."""

    __tablename__ = "penalties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category: Mapped[str] = mapped_column(String(1), nullable=False, index=True)
    category_title: Mapped[str] = mapped_column(String, nullable=False)
    category_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    penalty_number: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    team_individual: Mapped[str | None] = mapped_column(String, nullable=True)
    vertical: Mapped[str | None] = mapped_column(String, nullable=True)
    sprint_relay: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @validates("category", "category_title", "penalty_number", "name")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)


class Incident(TimestampMixin, RecordValidationMixin, Base):
    """Referee incident.

    Status axis (unofficial -> official) and decision axis (pending ->
    penalty_applied/rejected/no_action) are stored independently.
    """

    __tablename__ = "incidents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)
    race_location_id: Mapped[int | None] = mapped_column(ForeignKey("race_locations.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="unofficial", index=True)
    decision: Mapped[str] = mapped_column(String, nullable=False, default="pending", index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    officialized_by_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    officialized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decided_by_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decision_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @validates("status")
    def validate_status(self, key: str, value: str) -> str:
        self._require_in(key, value, INCIDENT_STATUSES)
        # official is terminal
        if self.status == "official" and value != "official":
            raise RecordInvalidError(type(self).__name__, key, "cannot move from official back to unofficial")
        return value

    @validates("decision")
    def validate_decision(self, key: str, value: str) -> str:
        return self._require_in(key, value, DECISION_TYPES)


class Report(TimestampMixin, RecordValidationMixin, Base):
    """Field report from a referee device; client_uuid makes resubmission idempotent."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_uuid: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    incident_id: Mapped[int | None] = mapped_column(ForeignKey("incidents.id", ondelete="SET NULL"), nullable=True, index=True)
    race_location_id: Mapped[int | None] = mapped_column(ForeignKey("race_locations.id", ondelete="SET NULL"), nullable=True)
    bib_number: Mapped[int] = mapped_column(Integer, nullable=False)
    athlete_name: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)

    @validates("client_uuid", "description")
    def validate_presence(self, key: str, value: str) -> str:
        return self._require(key, value)
