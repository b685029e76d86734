from race_logger.domain.value_objects.bib_number import BibNumber
from race_logger.domain.value_objects.incident_status import IncidentStatusValue
from race_logger.domain.value_objects.user_role import ROLE_HIERARCHY, UserRole

__all__ = ["ROLE_HIERARCHY", "BibNumber", "IncidentStatusValue", "UserRole"]
