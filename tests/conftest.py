"""Root conftest for all tests.

Every test that touches the database gets its own in-memory SQLite engine,
so repository commits and rollbacks never leak between tests.
"""

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from race_logger.broadcasting import RecordingBroadcaster
from race_logger.db import models
from race_logger.db.models import Base
from race_logger.db.repos import (
    AthleteRepo,
    CompetitionRepo,
    IncidentRepo,
    MagicLinkRepo,
    PenaltyRepo,
    RaceLocationRepo,
    RaceParticipationRepo,
    RaceRepo,
    RaceTypeLocationTemplateRepo,
    RaceTypeRepo,
    ReportRepo,
    RoleRepo,
    SessionRepo,
    UserRepo,
)
from race_logger.db.session import enable_sqlite_foreign_keys
from race_logger.domain.types import ROLE_NAMES

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="function")
def db_engine():
    """Fresh in-memory SQLite database with the full schema and FK enforcement."""
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session bound to the per-test engine.

    Usage:
        def test_something(db_session):
            repo = RaceRepo(db_session)
    """
    session = Session(bind=db_engine, autoflush=False, expire_on_commit=False)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def repos(db_session, broadcaster) -> SimpleNamespace:
    """One instance of every repository, sharing the session and broadcaster."""
    return SimpleNamespace(
        users=UserRepo(db_session, broadcaster),
        roles=RoleRepo(db_session, broadcaster),
        sessions=SessionRepo(db_session, broadcaster),
        magic_links=MagicLinkRepo(db_session, broadcaster),
        competitions=CompetitionRepo(db_session, broadcaster),
        race_types=RaceTypeRepo(db_session, broadcaster),
        races=RaceRepo(db_session, broadcaster),
        templates=RaceTypeLocationTemplateRepo(db_session, broadcaster),
        locations=RaceLocationRepo(db_session, broadcaster),
        athletes=AthleteRepo(db_session, broadcaster),
        participations=RaceParticipationRepo(db_session, broadcaster),
        penalties=PenaltyRepo(db_session, broadcaster),
        incidents=IncidentRepo(db_session, broadcaster),
        reports=ReportRepo(db_session, broadcaster),
    )


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def roles(db_session) -> dict[str, int]:
    """Every role, keyed by name -> id."""
    created = {}
    for name in ROLE_NAMES:
        role = models.Role(name=name)
        db_session.add(role)
        db_session.flush()
        created[name] = role.id
    db_session.commit()
    return created


@pytest.fixture
def password() -> str:
    """Password shared by every seeded user."""
    return TEST_PASSWORD


@pytest.fixture
def users(repos, roles) -> SimpleNamespace:
    """Users covering the roles the workflows care about."""

    def make(email: str, role_name: str | None = None, admin: bool = False, name: str = ""):
        user = repos.users.create(
            {"email_address": email, "password": TEST_PASSWORD, "role_name": role_name, "admin": admin, "name": name}
        )
        assert user is not None
        return user

    return SimpleNamespace(
        admin=make("admin@ismf.test", admin=True, name="Admin"),
        jury=make("jury@ismf.test", "jury_president", name="Jury President"),
        referee=make("referee@ismf.test", "national_referee", name="Nat Referee"),
        international=make("intl@ismf.test", "international_referee"),
        var_operator=make("var@ismf.test", "var_operator"),
        manager=make("manager@ismf.test", "referee_manager"),
        viewer=make("viewer@ismf.test", "broadcast_viewer"),
    )


@pytest.fixture
def competition_attrs() -> dict:
    return {
        "name": "World Cup Verbier 2026",
        "city": "Verbier",
        "place": "Swiss Alps",
        "country": "CHE",
        "description": "ISMF World Cup stage",
        "start_date": date(2026, 1, 15),
        "end_date": date(2026, 1, 17),
        "webpage_url": "https://www.ismf-ski.org",
    }


@pytest.fixture
def competition(repos, competition_attrs):
    created = repos.competitions.create(competition_attrs)
    assert created is not None
    return created


@pytest.fixture
def race_type(repos):
    created = repos.race_types.create({"name": "Sprint", "description": "Short format with heats"})
    assert created is not None
    return created


@pytest.fixture
def race(repos, competition, race_type):
    created = repos.races.create(
        {
            "competition_id": competition.id,
            "race_type_id": race_type.id,
            "name": "Women Sprint Qualification",
            "stage_type": "Qualification",
            "stage_name": "Qualification",
            "gender_category": "W",
            "position": 0,
            "scheduled_at": datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc),
        }
    )
    assert created is not None
    return created


@pytest.fixture
def templates(repos, race_type) -> list:
    """Three standard templates for the sprint race type."""
    rows = [
        ("Start", "start_area", "full", 10),
        ("Uphill 1 Top", "uphill1", "top", 20),
        ("Finish", "finish_area", "full", 30),
    ]
    created = []
    for name, segment, position, order in rows:
        template = repos.templates.create(
            {
                "race_type_id": race_type.id,
                "name": name,
                "course_segment": segment,
                "segment_position": position,
                "display_order": order,
                "is_standard": True,
            }
        )
        assert template is not None
        created.append(template)
    return created


@pytest.fixture
def athlete(repos):
    created = repos.athletes.create({"first_name": "Anna", "last_name": "Rossi", "gender": "F", "country": "ITA"})
    assert created is not None
    return created
