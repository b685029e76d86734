from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Incident, IncidentSummary


class IncidentRepo(Repo[Incident, IncidentSummary]):
    record_class = models.Incident
    struct_class = Incident
    summary_class = IncidentSummary

    returns_many = ("for_race", "pending", "official", "unofficial")

    def base_scope(self) -> Select:
        return select(models.Incident).order_by(models.Incident.created_at.desc(), models.Incident.id.desc())

    def for_race(self, race_id: int) -> list[IncidentSummary]:
        return self.where(race_id=race_id)

    def pending(self) -> list[IncidentSummary]:
        """Incidents still waiting for a decision."""
        return self.where(decision="pending")

    def official(self) -> list[IncidentSummary]:
        return self.where(status="official")

    def unofficial(self) -> list[IncidentSummary]:
        return self.where(status="unofficial")
