from __future__ import annotations

from datetime import datetime

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.entities.race import RaceRules
from race_logger.domain.types import (
    FLEXIBLE_DATETIME,
    GENDER_CATEGORY,
    RACE_STATUS,
    STAGE_TYPE,
    FlexibleDateTime,
    GenderCategory,
    OptionalDateTime,
    RaceStatus,
    StageType,
)


class Race(Struct, RaceRules):
    """Full race struct.

    ``race_type_name`` and ``competition_name`` come from the repository's
    default scope join; they are read-only display data.
    """

    id: int
    competition_id: int
    race_type_id: int
    name: str
    stage_type: StageType
    stage_name: str
    heat_number: int | None = None
    gender_category: GenderCategory
    position: int
    status: RaceStatus
    scheduled_at: OptionalDateTime = None
    race_type_name: str | None = None
    competition_name: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class RaceSummary(Summary, RaceRules):
    id: int
    competition_id: int
    race_type_id: int
    name: str
    stage_type: str
    stage_name: str
    heat_number: int | None
    gender_category: str
    position: int
    status: str
    scheduled_at: datetime | None
    race_type_name: str | None

    checks = {
        "stage_type": STAGE_TYPE,
        "gender_category": GENDER_CATEGORY,
        "status": RACE_STATUS,
        "scheduled_at": FLEXIBLE_DATETIME,
    }
