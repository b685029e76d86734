"""Custom race locations added by operators, and their ordering."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from race_logger.config.settings import settings
from race_logger.db.repos import RaceLocationRepo, RaceRepo
from race_logger.domain.contracts import CreateRaceLocation as CreateRaceLocationContract
from race_logger.operations.result import Failure, OperationResult, Success

DEFAULT_SEGMENT_POSITION = "middle"


def parse_orders(orders: Mapping[Any, Any]) -> dict[int, int] | None:
    """{id: display_order} with integer keys and values, None when any entry is not numeric."""
    try:
        return {int(key): int(value) for key, value in orders.items()}
    except (TypeError, ValueError):
        return None


class CreateRaceLocation:
    """Append a custom (non-standard) location after the race's current last one."""

    def __init__(self, location_repo: RaceLocationRepo, race_repo: RaceRepo | None = None):
        self.location_repo = location_repo
        lookups = {"race": (lambda id: race_repo.exists(id=id))} if race_repo is not None else {}
        self.contract = CreateRaceLocationContract(lookups=lookups)

    def __call__(self, race_id: int, params: Mapping[str, Any]) -> OperationResult:
        attributes = {**params, "race_id": race_id}
        if attributes.get("segment_position") is None:
            attributes["segment_position"] = DEFAULT_SEGMENT_POSITION
        validation = self.contract.call(attributes)
        if validation.failure:
            return Failure.from_validation(validation)

        attrs = validation.to_dict()
        if attrs.get("display_order") is None:
            attrs["display_order"] = self.location_repo.max_display_order(race_id) + settings.location_order_step
        attrs["is_standard"] = False

        result = self.location_repo.try_create(attrs)
        if not result.ok:
            return Failure("validation_error", result.error or "Location could not be saved")
        logger.info(f"Custom location {result.value.name!r} added to race {race_id} at order {result.value.display_order}")
        return Success(result.value)


class ReorderRaceLocations:
    def __init__(self, location_repo: RaceLocationRepo):
        self.location_repo = location_repo

    def __call__(self, race_id: int, orders: Mapping[Any, Any]) -> OperationResult:
        parsed = parse_orders(orders)
        if parsed is None:
            return Failure("invalid_order", "Display orders must be integers")
        if not parsed:
            return Success([])
        if not self.location_repo.reorder(race_id, parsed):
            return Failure("reorder_failed", f"Locations of race {race_id} were not reordered")
        return Success(self.location_repo.for_race(race_id))
