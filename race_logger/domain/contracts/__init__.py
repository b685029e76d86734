from race_logger.domain.contracts.athletes import BulkImportAthletes, ImportedAthlete
from race_logger.domain.contracts.authenticate_user import AuthenticateUser
from race_logger.domain.contracts.base import (
    Contract,
    ContractFailure,
    FailureKind,
    Param,
    RuleContext,
    ValidationResult,
    optional,
    required,
    rule,
)
from race_logger.domain.contracts.competitions import UpdateCompetition
from race_logger.domain.contracts.incident import IncidentContract
from race_logger.domain.contracts.locations import CreateLocationTemplate, CreateRaceLocation
from race_logger.domain.contracts.races import CreateRace, UpdateRace
from race_logger.domain.contracts.report import ReportContract

__all__ = [
    "AuthenticateUser",
    "BulkImportAthletes",
    "Contract",
    "ContractFailure",
    "CreateLocationTemplate",
    "CreateRace",
    "CreateRaceLocation",
    "FailureKind",
    "ImportedAthlete",
    "IncidentContract",
    "Param",
    "ReportContract",
    "RuleContext",
    "UpdateCompetition",
    "UpdateRace",
    "ValidationResult",
    "optional",
    "required",
    "rule",
]
