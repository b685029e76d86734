from race_logger.db.structs.athlete import Athlete, AthleteSummary
from race_logger.db.structs.competition import Competition, CompetitionSummary
from race_logger.db.structs.incident import Incident, IncidentSummary
from race_logger.db.structs.locations import (
    LocationTemplateSummary,
    RaceLocation,
    RaceLocationSummary,
    RaceTypeLocationTemplate,
)
from race_logger.db.structs.magic_link import MagicLink, MagicLinkSummary
from race_logger.db.structs.penalty import Penalty, PenaltySummary
from race_logger.db.structs.race import Race, RaceSummary
from race_logger.db.structs.race_participation import RaceParticipation, RaceParticipationSummary
from race_logger.db.structs.race_type import RaceType, RaceTypeSummary
from race_logger.db.structs.report import Report, ReportSummary
from race_logger.db.structs.results import AthleteImportResult, CopyParticipantsResult
from race_logger.db.structs.role import Role, RoleSummary
from race_logger.db.structs.session import Session, SessionSummary
from race_logger.db.structs.user import User, UserSummary

# Full struct -> summary struct, one pair per entity
STRUCT_PAIRS = (
    (User, UserSummary),
    (Role, RoleSummary),
    (Session, SessionSummary),
    (MagicLink, MagicLinkSummary),
    (Competition, CompetitionSummary),
    (RaceType, RaceTypeSummary),
    (Race, RaceSummary),
    (RaceTypeLocationTemplate, LocationTemplateSummary),
    (RaceLocation, RaceLocationSummary),
    (Athlete, AthleteSummary),
    (RaceParticipation, RaceParticipationSummary),
    (Penalty, PenaltySummary),
    (Incident, IncidentSummary),
    (Report, ReportSummary),
)

__all__ = [
    "STRUCT_PAIRS",
    "Athlete",
    "AthleteImportResult",
    "AthleteSummary",
    "Competition",
    "CompetitionSummary",
    "CopyParticipantsResult",
    "Incident",
    "IncidentSummary",
    "LocationTemplateSummary",
    "MagicLink",
    "MagicLinkSummary",
    "Penalty",
    "PenaltySummary",
    "Race",
    "RaceLocation",
    "RaceLocationSummary",
    "RaceParticipation",
    "RaceParticipationSummary",
    "RaceSummary",
    "RaceType",
    "RaceTypeLocationTemplate",
    "RaceTypeSummary",
    "Report",
    "ReportSummary",
    "Role",
    "RoleSummary",
    "Session",
    "SessionSummary",
    "User",
    "UserSummary",
]
