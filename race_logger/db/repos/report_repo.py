from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Report, ReportSummary

Row = models.Report


class ReportRepo(Repo[Report, ReportSummary]):
    """Field reports, newest first."""

    record_class = models.Report
    struct_class = Report
    summary_class = ReportSummary

    returns_one = ("find_by_client_uuid",)
    returns_many = ("for_race", "for_user", "for_incident", "unlinked")

    def base_scope(self) -> Select:
        return select(Row).order_by(Row.created_at.desc(), Row.id.desc())

    def find_by_client_uuid(self, client_uuid: str) -> Report | None:
        return self.find_by(client_uuid=client_uuid)

    def for_race(self, race_id: int) -> list[ReportSummary]:
        return self.where(race_id=race_id)

    def for_user(self, user_id: int) -> list[ReportSummary]:
        return self.where(user_id=user_id)

    def for_incident(self, incident_id: int) -> list[ReportSummary]:
        return self.where(incident_id=incident_id)

    def unlinked(self, race_id: int | None = None) -> list[ReportSummary]:
        """Reports not yet grouped into an incident."""
        stmt = self.base_scope().where(Row.incident_id.is_(None))
        if race_id is not None:
            stmt = stmt.where(Row.race_id == race_id)
        return self._many(stmt)
