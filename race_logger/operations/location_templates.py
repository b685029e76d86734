"""Location templates of a race type, copied into every new race of that type."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from race_logger.config.settings import settings
from race_logger.db.repos import RaceTypeLocationTemplateRepo, RaceTypeRepo
from race_logger.domain.contracts import CreateLocationTemplate as CreateLocationTemplateContract
from race_logger.operations.race_locations import DEFAULT_SEGMENT_POSITION, parse_orders
from race_logger.operations.result import Failure, OperationResult, Success


class CreateLocationTemplate:
    def __init__(self, template_repo: RaceTypeLocationTemplateRepo, race_type_repo: RaceTypeRepo | None = None):
        self.template_repo = template_repo
        lookups = {"race_type": (lambda id: race_type_repo.exists(id=id))} if race_type_repo is not None else {}
        self.contract = CreateLocationTemplateContract(lookups=lookups)

    def __call__(self, race_type_id: int, params: Mapping[str, Any]) -> OperationResult:
        attributes = {**params, "race_type_id": race_type_id}
        if attributes.get("segment_position") is None:
            attributes["segment_position"] = DEFAULT_SEGMENT_POSITION
        # Blank optional strings are stored as NULL
        for key in ("color_code", "description"):
            if attributes.get(key) == "":
                attributes[key] = None
        validation = self.contract.call(attributes)
        if validation.failure:
            return Failure.from_validation(validation)

        attrs = validation.to_dict()
        if attrs.get("display_order") is None:
            attrs["display_order"] = self.template_repo.max_display_order(race_type_id) + settings.location_order_step
        attrs["is_standard"] = bool(attrs.get("is_standard"))

        result = self.template_repo.try_create(attrs)
        if not result.ok:
            return Failure("validation_error", result.error or "Template could not be saved")
        return Success(result.value)


class ReorderLocationTemplates:
    def __init__(self, template_repo: RaceTypeLocationTemplateRepo):
        self.template_repo = template_repo

    def __call__(self, race_type_id: int, orders: Mapping[Any, Any]) -> OperationResult:
        parsed = parse_orders(orders)
        if parsed is None:
            return Failure("invalid_order", "Display orders must be integers")
        if not parsed:
            return Success([])
        if not self.template_repo.reorder(race_type_id, parsed):
            return Failure("reorder_failed", f"Templates of race type {race_type_id} were not reordered")
        return Success(self.template_repo.for_race_type(race_type_id))
