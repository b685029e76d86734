"""Tests for the predicate mixins carried by structs."""

from datetime import date, datetime, timedelta, timezone

import pytest

from race_logger.db.structs import (
    Competition,
    Incident,
    MagicLink,
    Penalty,
    Race,
    RaceLocation,
    RaceParticipationSummary,
    Report,
    UserSummary,
)
from race_logger.domain.entities import build_stage_name

NOW = datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)


def make_race(**overrides) -> Race:
    attributes = {
        "id": 1,
        "competition_id": 1,
        "race_type_id": 1,
        "name": "Men Sprint",
        "stage_type": "Heat",
        "stage_name": "Heat 2",
        "heat_number": 2,
        "gender_category": "M",
        "position": 1,
        "status": "scheduled",
        "scheduled_at": NOW,
        "race_type_name": "sprint",
        "created_at": NOW,
        "updated_at": NOW,
    }
    attributes.update(overrides)
    return Race.build(attributes)


def make_incident(**overrides) -> Incident:
    attributes = {"id": 1, "race_id": 1, "created_at": NOW, "updated_at": NOW}
    attributes.update(overrides)
    return Incident.build(attributes)


@pytest.mark.parametrize(
    ("stage_type", "heat_number", "expected"),
    [("Final", None, "Final"), ("Heat", 2, "Heat 2"), ("Qualification", 0, "Qualification")],
)
def test_build_stage_name(stage_type, heat_number, expected) -> None:
    """Stage names carry the heat number only when there is one."""
    assert build_stage_name(stage_type, heat_number) == expected


class TestRaceRules:
    def test_scheduling(self) -> None:
        race = make_race()
        assert race.is_scheduled()
        assert race.can_start(now=NOW)
        assert not race.can_start(now=NOW - timedelta(minutes=1))
        assert race.is_upcoming(now=NOW - timedelta(minutes=1))
        assert race.minutes_until_start(now=NOW - timedelta(minutes=30)) == 30

    def test_completed_race_cannot_be_edited(self) -> None:
        race = make_race(status="completed")
        assert race.is_completed()
        assert not race.can_edit()
        assert race.is_started()
        assert race.minutes_until_start(now=NOW) == 0

    def test_display(self) -> None:
        race = make_race()
        assert race.stage_abbrev() == "H2"
        assert race.short_name() == "Sprint H2"
        assert race.gender_category_display() == "Men"
        assert race.formatted_scheduled_time() == "09:00"
        assert make_race(status="in_progress").status_text() == "In Progress"

    def test_team_categories(self) -> None:
        assert make_race(gender_category="MW").is_team_race()
        assert make_race(gender_category="W").is_individual_race()

    def test_unscheduled(self) -> None:
        race = make_race(scheduled_at=None)
        assert not race.can_start(now=NOW)
        assert race.formatted_scheduled_time() == "Not scheduled"


class TestIncidentRules:
    def test_new_incident(self) -> None:
        incident = make_incident()
        assert incident.is_unofficial()
        assert incident.is_pending()
        assert incident.can_officialize()
        assert not incident.can_decide()

    def test_official_pending_requires_decision(self) -> None:
        incident = make_incident(status="official")
        assert incident.can_decide()
        assert incident.requires_decision()
        assert not incident.can_transition_to("unofficial")

    def test_decided_incident_is_complete(self) -> None:
        incident = make_incident(status="official", decision="penalty_applied", decided_by_user_id=4)
        assert incident.is_penalty_applied()
        assert incident.is_workflow_complete()
        assert not incident.can_decide()
        assert incident.decided_by(UserSummary(4, "jury@ismf.test", "", False, "jury_president", NOW))


class TestUserRules:
    def make_user(self, role_name=None, admin=False) -> UserSummary:
        return UserSummary(
            id=1, email_address="someone@ismf.test", name="", admin=admin, role_name=role_name, created_at=NOW
        )

    def test_referee(self) -> None:
        user = self.make_user("international_referee")
        assert user.is_referee()
        assert user.can_decide_incident()
        assert user.role().international_referee

    def test_admin_without_role(self) -> None:
        user = self.make_user(admin=True)
        assert user.is_admin()
        assert user.role() is None
        assert user.can_manage_users()
        assert user.display_name() == "someone"

    def test_unknown_role_rejected_at_construction(self) -> None:
        from race_logger.core.errors import ConstructionError

        with pytest.raises(ConstructionError) as excinfo:
            self.make_user("coach")
        assert excinfo.value.fields == ["role_name"]


def test_competition_calendar() -> None:
    """Competition status is computed relative to the given day."""
    competition = Competition.build(
        {
            "id": 1,
            "name": "World Cup Verbier 2026",
            "city": "Verbier",
            "place": "Swiss Alps",
            "country": "CHE",
            "description": "",
            "start_date": date(2026, 1, 15),
            "end_date": date(2026, 1, 17),
            "webpage_url": "https://www.ismf-ski.org",
            "created_at": NOW,
            "updated_at": NOW,
        }
    )
    assert competition.status(today=date(2026, 1, 16)) == "ongoing"
    assert competition.status(today=date(2026, 1, 1)) == "upcoming"
    assert competition.status(today=date(2026, 2, 1)) == "past"
    assert competition.duration_days() == 3
    assert competition.short_date_range() == "Jan 15-17, 2026"
    assert competition.country_name() == "Switzerland"
    assert competition.display_name() == "Verbier 2026"


def test_magic_link_state() -> None:
    """A link is usable while unused and unexpired."""
    link = MagicLink.build(
        {"id": 1, "user_id": 1, "token": "t", "expires_at": NOW, "created_at": NOW, "updated_at": NOW}
    )
    assert link.is_valid_for_use(now=NOW - timedelta(seconds=1))
    assert link.is_expired(now=NOW)
    assert not link.with_changes(used_at=NOW).is_valid_for_use(now=NOW - timedelta(hours=1))


def test_participation_display() -> None:
    """Bibs are shown zero-padded to three digits, with the athlete name when known."""
    participation = RaceParticipationSummary(
        id=1, race_id=1, athlete_id=1, bib_number=7, status="registered", active_in_heat=True, athlete_name="Anna Rossi"
    )
    assert participation.display_name() == "007 - Anna Rossi"
    assert participation.bib() == 7
    assert participation.can_report()
    assert not RaceParticipationSummary(1, 1, 1, 7, "dns", True, None).can_report()


def test_location_display() -> None:
    """Custom locations are the non-standard ones."""
    location = RaceLocation.build(
        {
            "id": 1,
            "race_id": 1,
            "name": "Bootpack",
            "course_segment": "footpart",
            "segment_position": "middle",
            "display_order": 40,
            "created_at": NOW,
            "updated_at": NOW,
        }
    )
    assert location.is_custom()
    assert location.display_name_with_segment() == "Bootpack (Footpart)"
    assert location.position_display() == "Middle"


def test_penalty_for_race_type() -> None:
    """The applicable penalty column depends on the race type."""
    penalty = Penalty.build(
        {
            "id": 1,
            "category": "A",
            "category_title": "Equipment",
            "penalty_number": "A.1",
            "name": "Missing mandatory equipment",
            "team_individual": "3 min",
            "vertical": "1 min",
            "sprint_relay": "disqualification",
            "created_at": NOW,
            "updated_at": NOW,
        }
    )
    assert penalty.penalty_for_race_type("Sprint") == "disqualification"
    assert penalty.penalty_for_race_type("vertical") == "1 min"
    assert penalty.penalty_for_race_type("Downhill") == "N/A"
    assert penalty.is_disqualification()
    assert penalty.display_name() == "A.1 - Missing mandatory equipment"


def test_report_rules() -> None:
    """Reports know whether they carry a video and an incident link."""
    report = Report.build(
        {
            "id": 1,
            "client_uuid": "0b6f4a1e-8c8e-4d5a-9d4e-2b7f3c1a9e10",
            "race_id": 1,
            "user_id": 1,
            "bib_number": 12,
            "description": "Cut the course",
            "created_at": NOW,
            "updated_at": NOW,
        }
    )
    assert not report.has_video()
    assert not report.is_linked_to_incident()
    assert report.athlete_display_name() == "Unknown Athlete"
