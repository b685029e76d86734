from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Penalty, PenaltySummary


class PenaltyRepo(Repo[Penalty, PenaltySummary]):
    """ISMF rulebook penalties, ordered by category then number."""

    record_class = models.Penalty
    struct_class = Penalty
    summary_class = PenaltySummary

    returns_one = ("find_by_number",)
    returns_many = ("by_category",)

    def base_scope(self) -> Select:
        return select(models.Penalty).order_by(models.Penalty.category, models.Penalty.penalty_number)

    def find_by_number(self, penalty_number: str) -> Penalty | None:
        return self.find_by(penalty_number=penalty_number)

    def by_category(self, category: str) -> list[PenaltySummary]:
        return self.where(category=category.upper())
