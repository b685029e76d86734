from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import RaceType, RaceTypeSummary


class RaceTypeRepo(Repo[RaceType, RaceTypeSummary]):
    record_class = models.RaceType
    struct_class = RaceType
    summary_class = RaceTypeSummary

    returns_one = ("find_by_name",)

    def base_scope(self) -> Select:
        return select(models.RaceType).order_by(models.RaceType.name)

    def find_by_name(self, name: str) -> RaceType | None:
        return self.find_by(name=name)
