from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import Select, func, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import LocationTemplateSummary, RaceTypeLocationTemplate

Row = models.RaceTypeLocationTemplate


class RaceTypeLocationTemplateRepo(Repo[RaceTypeLocationTemplate, LocationTemplateSummary]):
    """Standard locations per race type, ordered by display_order."""

    record_class = models.RaceTypeLocationTemplate
    struct_class = RaceTypeLocationTemplate
    summary_class = LocationTemplateSummary

    returns_many = ("for_race_type", "standard", "custom")

    def base_scope(self) -> Select:
        return select(Row).order_by(Row.race_type_id, Row.display_order, Row.id)

    def for_race_type(self, race_type_id: int) -> list[LocationTemplateSummary]:
        return self.where(race_type_id=race_type_id)

    def standard(self, race_type_id: int) -> list[LocationTemplateSummary]:
        return self.where(race_type_id=race_type_id, is_standard=True)

    def custom(self, race_type_id: int) -> list[LocationTemplateSummary]:
        return self.where(race_type_id=race_type_id, is_standard=False)

    def max_display_order(self, race_type_id: int) -> int:
        return self.session.scalar(select(func.max(Row.display_order)).where(Row.race_type_id == race_type_id)) or 0

    def reorder(self, race_type_id: int, orders: Mapping[int, int]) -> bool:
        """Apply {template_id: display_order} atomically; False leaves every row unchanged."""
        return self._reorder("race_type_id", race_type_id, orders)
