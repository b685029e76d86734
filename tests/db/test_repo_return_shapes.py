"""Declared single-record methods return a full struct, collection methods a list of summaries.

Every custom name a repository lists in ``returns_one`` / ``returns_many`` is
called against one seeded race day.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from race_logger.db.repo import Repo
from race_logger.db.repos import ALL_REPOS

BASE_NAMES = frozenset(Repo.returns_one) | frozenset(Repo.returns_many)
REPORT_UUID = "5d1c0b7e-2f4a-4c3e-8b9a-7e6f5d4c3b2a"

ONE_CALLS = {
    ("UserRepo", "find_by_email"): lambda w: w.repos.users.find_by_email("referee@ismf.test"),
    ("UserRepo", "authenticate"): lambda w: w.repos.users.authenticate("referee@ismf.test", w.password),
    ("RoleRepo", "find_by_name"): lambda w: w.repos.roles.find_by_name("jury_president"),
    ("SessionRepo", "create_for_user"): lambda w: w.repos.sessions.create_for_user(w.users.referee.id, "10.0.0.7"),
    ("MagicLinkRepo", "find_by_token"): lambda w: w.repos.magic_links.find_by_token(w.link.token),
    ("MagicLinkRepo", "find_valid_by_token"): lambda w: w.repos.magic_links.find_valid_by_token(w.link.token),
    ("MagicLinkRepo", "create_for_user"): lambda w: w.repos.magic_links.create_for_user(w.users.jury.id),
    ("MagicLinkRepo", "mark_as_used"): lambda w: w.repos.magic_links.mark_as_used(w.link.id),
    ("CompetitionRepo", "find_by_name"): lambda w: w.repos.competitions.find_by_name(w.competition.name),
    ("RaceTypeRepo", "find_by_name"): lambda w: w.repos.race_types.find_by_name("Sprint"),
    ("AthleteRepo", "find_by_license"): lambda w: w.repos.athletes.find_by_license("SUI-44"),
    ("AthleteRepo", "find_by_name"): lambda w: w.repos.athletes.find_by_name("Anna", "Rossi", "F", "ITA"),
    ("RaceParticipationRepo", "find_by_bib"): lambda w: w.repos.participations.find_by_bib(w.race.id, 7),
    ("RaceParticipationRepo", "find_by_athlete"): lambda w: w.repos.participations.find_by_athlete(w.race.id, w.athlete.id),
    ("PenaltyRepo", "find_by_number"): lambda w: w.repos.penalties.find_by_number("B.2"),
    ("ReportRepo", "find_by_client_uuid"): lambda w: w.repos.reports.find_by_client_uuid(REPORT_UUID),
}

MANY_CALLS = {
    ("UserRepo", "admins"): lambda w: w.repos.users.admins(),
    ("UserRepo", "referees"): lambda w: w.repos.users.referees(),
    ("UserRepo", "with_role"): lambda w: w.repos.users.with_role("var_operator"),
    ("UserRepo", "search"): lambda w: w.repos.users.search("referee"),
    ("SessionRepo", "for_user"): lambda w: w.repos.sessions.for_user(w.users.referee.id),
    ("MagicLinkRepo", "for_user"): lambda w: w.repos.magic_links.for_user(w.users.referee.id),
    ("MagicLinkRepo", "active_for_user"): lambda w: w.repos.magic_links.active_for_user(w.users.referee.id),
    ("MagicLinkRepo", "expired"): lambda w: w.repos.magic_links.expired(),
    ("MagicLinkRepo", "used"): lambda w: w.repos.magic_links.used(),
    ("CompetitionRepo", "upcoming"): lambda w: w.repos.competitions.upcoming(today=date(2026, 1, 1)),
    ("CompetitionRepo", "ongoing"): lambda w: w.repos.competitions.ongoing(today=date(2026, 1, 16)),
    ("CompetitionRepo", "past"): lambda w: w.repos.competitions.past(today=date(2026, 2, 1)),
    ("CompetitionRepo", "search"): lambda w: w.repos.competitions.search("Verbier"),
    ("CompetitionRepo", "by_country"): lambda w: w.repos.competitions.by_country("che"),
    ("CompetitionRepo", "by_city"): lambda w: w.repos.competitions.by_city("Verbier"),
    ("CompetitionRepo", "by_date_range"): lambda w: w.repos.competitions.by_date_range(date(2026, 1, 1), date(2026, 1, 31)),
    ("CompetitionRepo", "filtered"): lambda w: w.repos.competitions.filtered(sort="name"),
    ("RaceRepo", "for_competition"): lambda w: w.repos.races.for_competition(w.competition.id),
    ("RaceRepo", "by_race_type"): lambda w: w.repos.races.by_race_type(w.competition.id, w.race_type.id),
    ("RaceRepo", "scheduled"): lambda w: w.repos.races.scheduled(),
    ("RaceRepo", "in_progress"): lambda w: w.repos.races.in_progress(),
    ("RaceRepo", "completed"): lambda w: w.repos.races.completed(),
    ("RaceRepo", "auto_startable"): lambda w: w.repos.races.auto_startable(),
    ("RaceRepo", "auto_completable"): lambda w: w.repos.races.auto_completable(),
    ("RaceTypeLocationTemplateRepo", "for_race_type"): lambda w: w.repos.templates.for_race_type(w.race_type.id),
    ("RaceTypeLocationTemplateRepo", "standard"): lambda w: w.repos.templates.standard(w.race_type.id),
    ("RaceTypeLocationTemplateRepo", "custom"): lambda w: w.repos.templates.custom(w.race_type.id),
    ("RaceLocationRepo", "for_race"): lambda w: w.repos.locations.for_race(w.race.id),
    ("RaceLocationRepo", "for_touch_selector"): lambda w: w.repos.locations.for_touch_selector(w.race.id),
    ("RaceLocationRepo", "standard"): lambda w: w.repos.locations.standard(w.race.id),
    ("RaceLocationRepo", "custom"): lambda w: w.repos.locations.custom(w.race.id),
    ("RaceLocationRepo", "by_segment"): lambda w: w.repos.locations.by_segment(w.race.id, "finish_area"),
    ("RaceLocationRepo", "copy_from_templates"): lambda w: w.repos.locations.copy_from_templates(w.race.id, w.templates),
    ("AthleteRepo", "search"): lambda w: w.repos.athletes.search("Rossi"),
    ("AthleteRepo", "by_country"): lambda w: w.repos.athletes.by_country("ita"),
    ("RaceParticipationRepo", "for_race"): lambda w: w.repos.participations.for_race(w.race.id),
    ("RaceParticipationRepo", "active"): lambda w: w.repos.participations.active(w.race.id),
    ("RaceParticipationRepo", "by_status"): lambda w: w.repos.participations.by_status(w.race.id, "registered"),
    ("PenaltyRepo", "by_category"): lambda w: w.repos.penalties.by_category("b"),
    ("IncidentRepo", "for_race"): lambda w: w.repos.incidents.for_race(w.race.id),
    ("IncidentRepo", "pending"): lambda w: w.repos.incidents.pending(),
    ("IncidentRepo", "official"): lambda w: w.repos.incidents.official(),
    ("IncidentRepo", "unofficial"): lambda w: w.repos.incidents.unofficial(),
    ("ReportRepo", "for_race"): lambda w: w.repos.reports.for_race(w.race.id),
    ("ReportRepo", "for_user"): lambda w: w.repos.reports.for_user(w.users.referee.id),
    ("ReportRepo", "for_incident"): lambda w: w.repos.reports.for_incident(w.incident.id),
    ("ReportRepo", "unlinked"): lambda w: w.repos.reports.unlinked(),
}


def _repo_named(repos, class_name: str) -> Repo:
    return next(repo for repo in vars(repos).values() if type(repo).__name__ == class_name)


@pytest.fixture
def race_day(repos, users, password, competition, race_type, race, templates, athlete) -> SimpleNamespace:
    """One of everything a repository can be asked about."""
    repos.athletes.create(
        {"first_name": "Lea", "last_name": "Meier", "gender": "F", "country": "CHE", "license_number": "SUI-44"}
    )
    repos.locations.copy_from_templates(race.id, templates)
    repos.participations.create_for_import(race.id, athlete.id, 7)
    repos.penalties.create(
        {"category": "B", "category_title": "Course", "penalty_number": "B.2", "name": "Shortcut", "vertical": "3 min"}
    )
    incident = repos.incidents.create({"race_id": race.id, "description": "Skins on in descent"})
    repos.reports.create(
        {
            "client_uuid": REPORT_UUID,
            "race_id": race.id,
            "user_id": users.referee.id,
            "incident_id": incident.id,
            "bib_number": 7,
            "description": "Skins on in descent",
        }
    )
    link = repos.magic_links.create_for_user(users.referee.id)
    repos.sessions.create_for_user(users.referee.id)
    return SimpleNamespace(
        repos=repos,
        users=users,
        password=password,
        competition=competition,
        race_type=race_type,
        race=race,
        templates=templates,
        athlete=athlete,
        incident=incident,
        link=link,
    )


@pytest.mark.parametrize("repo_class", ALL_REPOS, ids=lambda cls: cls.__name__)
def test_every_declared_method_has_a_call(repo_class) -> None:
    name = repo_class.__name__
    assert {method for repo, method in ONE_CALLS if repo == name} == set(repo_class.one_methods - BASE_NAMES)
    assert {method for repo, method in MANY_CALLS if repo == name} == set(repo_class.many_methods - BASE_NAMES)


@pytest.mark.parametrize("key", list(ONE_CALLS), ids=lambda key: ".".join(key))
def test_one_methods_return_a_full_struct(race_day, key) -> None:
    repo = _repo_named(race_day.repos, key[0])
    result = ONE_CALLS[key](race_day)

    assert not isinstance(result, list)
    assert isinstance(result, repo.struct_class)


@pytest.mark.parametrize("key", list(MANY_CALLS), ids=lambda key: ".".join(key))
def test_many_methods_return_summaries(race_day, key) -> None:
    repo = _repo_named(race_day.repos, key[0])
    result = MANY_CALLS[key](race_day)

    assert isinstance(result, list)
    assert all(isinstance(item, repo.summary_class) for item in result)
