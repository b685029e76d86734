from __future__ import annotations

from datetime import datetime

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.entities.incident import IncidentRules
from race_logger.domain.types import (
    DECISION_TYPE,
    FLEXIBLE_DATETIME,
    INCIDENT_STATUS,
    DecisionType,
    FlexibleDateTime,
    IncidentStatus,
    OptionalDateTime,
)


class Incident(Struct, IncidentRules):
    """Referee incident: one observed infringement moving through officialization and decision."""

    id: int
    race_id: int
    race_location_id: int | None = None
    status: IncidentStatus = "unofficial"
    decision: DecisionType = "pending"
    description: str | None = None
    officialized_by_user_id: int | None = None
    officialized_at: OptionalDateTime = None
    decided_by_user_id: int | None = None
    decided_at: OptionalDateTime = None
    decision_notes: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class IncidentSummary(Summary, IncidentRules):
    id: int
    race_id: int
    race_location_id: int | None
    status: str
    decision: str
    officialized_by_user_id: int | None
    decided_by_user_id: int | None
    created_at: datetime

    checks = {"status": INCIDENT_STATUS, "decision": DECISION_TYPE, "created_at": FLEXIBLE_DATETIME}
