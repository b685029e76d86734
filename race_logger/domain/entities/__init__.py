from race_logger.domain.entities.incident import IncidentRules
from race_logger.domain.entities.race import RaceRules, build_stage_name
from race_logger.domain.entities.report import ReportRules
from race_logger.domain.entities.user import UserRules

__all__ = ["IncidentRules", "RaceRules", "ReportRules", "UserRules", "build_stage_name"]
