from __future__ import annotations

from datetime import datetime

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.entities.report import ReportRules
from race_logger.domain.types import BIB_NUMBER, FLEXIBLE_DATETIME, UUID, BibNumber, FlexibleDateTime, UUIDString


class Report(Struct, ReportRules):
    """Observation submitted by a referee device, optionally linked to an incident."""

    id: int
    client_uuid: UUIDString
    race_id: int
    user_id: int
    bib_number: BibNumber
    description: str
    race_location_id: int | None = None
    incident_id: int | None = None
    athlete_name: str | None = None
    video_url: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class ReportSummary(Summary, ReportRules):
    id: int
    client_uuid: str
    race_id: int
    bib_number: int
    incident_id: int | None
    athlete_name: str | None
    video_url: str | None
    created_at: datetime

    checks = {"client_uuid": UUID, "bib_number": BIB_NUMBER, "created_at": FLEXIBLE_DATETIME}
