"""Race location persistence.

Standard locations are copied from the race type's templates when a race is
created; custom ones are added per race by operators.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from sqlalchemy import Select, func, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import RaceLocation, RaceLocationSummary

Row = models.RaceLocation

TEMPLATE_FIELDS = (
    "name",
    "course_segment",
    "segment_position",
    "display_order",
    "is_standard",
    "color_code",
    "description",
)


class RaceLocationRepo(Repo[RaceLocation, RaceLocationSummary]):
    record_class = models.RaceLocation
    struct_class = RaceLocation
    summary_class = RaceLocationSummary

    returns_many = ("for_race", "for_touch_selector", "standard", "custom", "by_segment", "copy_from_templates")

    def base_scope(self) -> Select:
        return select(Row).order_by(Row.race_id, Row.display_order, Row.id)

    def for_race(self, race_id: int) -> list[RaceLocationSummary]:
        return self.where(race_id=race_id)

    def for_touch_selector(self, race_id: int) -> list[RaceLocationSummary]:
        """Locations as shown on the referee touch selector (display order)."""
        return self._many(select(Row).where(Row.race_id == race_id).order_by(Row.display_order, Row.id))

    def standard(self, race_id: int) -> list[RaceLocationSummary]:
        return self.where(race_id=race_id, is_standard=True)

    def custom(self, race_id: int) -> list[RaceLocationSummary]:
        return self.where(race_id=race_id, is_standard=False)

    def by_segment(self, race_id: int, course_segment: str) -> list[RaceLocationSummary]:
        return self.where(race_id=race_id, course_segment=course_segment)

    def max_display_order(self, race_id: int) -> int:
        return self.session.scalar(select(func.max(Row.display_order)).where(Row.race_id == race_id)) or 0

    def reorder(self, race_id: int, orders: Mapping[int, int]) -> bool:
        """Apply {location_id: display_order} atomically; False leaves every row unchanged."""
        return self._reorder("race_id", race_id, orders)

    def copy_from_templates(self, race_id: int, templates: Iterable[Any]) -> list[RaceLocationSummary] | None:
        """Create one location per template in a single transaction.

        Returns the created locations, or None when any row is rejected (in
        which case nothing is written).
        """
        rows = []
        for template in templates:
            row = {name: getattr(template, name, None) for name in TEMPLATE_FIELDS}
            row["race_id"] = race_id
            rows.append(row)
        if not rows:
            return []

        created = self._insert_all(rows)
        if created is None:
            logger.warning(f"Copying {len(rows)} location templates into race {race_id} rolled back")
            return None
        logger.info(f"Copied {len(created)} location templates into race {race_id}")
        return [RaceLocationSummary.from_struct(location) for location in created]
