from race_logger.db.repos.athlete_repo import AthleteRepo
from race_logger.db.repos.competition_repo import CompetitionRepo
from race_logger.db.repos.incident_repo import IncidentRepo
from race_logger.db.repos.location_template_repo import RaceTypeLocationTemplateRepo
from race_logger.db.repos.magic_link_repo import MagicLinkRepo
from race_logger.db.repos.penalty_repo import PenaltyRepo
from race_logger.db.repos.race_location_repo import RaceLocationRepo
from race_logger.db.repos.race_participation_repo import RaceParticipationRepo
from race_logger.db.repos.race_repo import RaceRepo
from race_logger.db.repos.race_type_repo import RaceTypeRepo
from race_logger.db.repos.report_repo import ReportRepo
from race_logger.db.repos.role_repo import RoleRepo
from race_logger.db.repos.session_repo import SessionRepo
from race_logger.db.repos.user_repo import UserRepo

ALL_REPOS = (
    UserRepo,
    RoleRepo,
    SessionRepo,
    MagicLinkRepo,
    CompetitionRepo,
    RaceTypeRepo,
    RaceRepo,
    RaceTypeLocationTemplateRepo,
    RaceLocationRepo,
    AthleteRepo,
    RaceParticipationRepo,
    PenaltyRepo,
    IncidentRepo,
    ReportRepo,
)

__all__ = [
    "ALL_REPOS",
    "AthleteRepo",
    "CompetitionRepo",
    "IncidentRepo",
    "MagicLinkRepo",
    "PenaltyRepo",
    "RaceLocationRepo",
    "RaceParticipationRepo",
    "RaceRepo",
    "RaceTypeLocationTemplateRepo",
    "RaceTypeRepo",
    "ReportRepo",
    "RoleRepo",
    "SessionRepo",
    "UserRepo",
]
