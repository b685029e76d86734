"""Race use cases: create, update, delete and location population."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from race_logger.db.repos import CompetitionRepo, RaceLocationRepo, RaceRepo, RaceTypeLocationTemplateRepo, RaceTypeRepo
from race_logger.domain.contracts import CreateRace as CreateRaceContract
from race_logger.domain.contracts import UpdateRace as UpdateRaceContract
from race_logger.domain.entities.race import build_stage_name
from race_logger.operations.result import Failure, OperationResult, Success


class PopulateLocations:
    """Copy a race type's location templates into a race, all or nothing."""

    def __init__(self, template_repo: RaceTypeLocationTemplateRepo, location_repo: RaceLocationRepo):
        self.template_repo = template_repo
        self.location_repo = location_repo

    def __call__(self, race_id: int, race_type_id: int) -> OperationResult:
        templates = self.template_repo.for_race_type(race_type_id)
        if not templates:
            return Failure("no_templates", f"No location templates found for race type {race_type_id}")

        full_templates = [self.template_repo.find_or_raise(template.id) for template in templates]
        locations = self.location_repo.copy_from_templates(race_id, full_templates)
        if locations is None:
            return Failure("validation_error", f"Could not copy location templates into race {race_id}")
        return Success(locations)


class CreateRace:
    """Validate, derive stage name and position, persist, then populate locations.

    Failing to populate locations is logged and does not fail the creation.
    """

    def __init__(
        self,
        race_repo: RaceRepo,
        populate_locations: PopulateLocations,
        competition_repo: CompetitionRepo | None = None,
        race_type_repo: RaceTypeRepo | None = None,
    ):
        self.race_repo = race_repo
        self.populate_locations = populate_locations
        lookups = {}
        if competition_repo is not None:
            lookups["competition"] = lambda id: competition_repo.exists(id=id)
        if race_type_repo is not None:
            lookups["race_type"] = lambda id: race_type_repo.exists(id=id)
        self.contract = CreateRaceContract(lookups=lookups)

    def __call__(self, params: Mapping[str, Any]) -> OperationResult:
        validation = self.contract.call(params)
        if validation.failure:
            return Failure.from_validation(validation)

        attrs = validation.to_dict()
        attrs["stage_name"] = build_stage_name(attrs["stage_type"], attrs.get("heat_number"))
        attrs["position"] = self._next_position(attrs["competition_id"], attrs["race_type_id"])
        attrs.setdefault("status", "scheduled")

        result = self.race_repo.try_create(attrs)
        if not result.ok:
            return Failure("database", result.error or "Race could not be saved")
        race = result.value

        populated = self.populate_locations(race.id, race.race_type_id)
        if populated.failure:
            logger.warning(f"Failed to populate locations for race {race.id}: {populated.message}")
        logger.info(f"Race created: id={race.id} name={race.name!r} stage={race.stage_name!r} position={race.position}")
        return Success(race)

    def _next_position(self, competition_id: int, race_type_id: int) -> int:
        current = self.race_repo.max_position(competition_id, race_type_id)
        return 0 if current is None else current + 1


class UpdateRace:
    def __init__(self, race_repo: RaceRepo):
        self.race_repo = race_repo
        self.contract = UpdateRaceContract()

    def __call__(self, id: int, params: Mapping[str, Any]) -> OperationResult:
        existing = self.race_repo.find(id)
        if existing is None:
            return Failure("not_found", "Race not found")
        if existing.is_completed():
            return Failure("completed", "Cannot edit completed races")

        validation = self.contract.call(params)
        if validation.failure:
            return Failure.from_validation(validation)

        attrs = validation.to_dict()
        if "stage_type" in attrs or "heat_number" in attrs:
            stage_type = attrs.get("stage_type") or existing.stage_type
            heat_number = attrs["heat_number"] if "heat_number" in attrs else existing.heat_number
            attrs["stage_name"] = build_stage_name(stage_type, heat_number)

        result = self.race_repo.try_update(id, attrs)
        if not result.ok:
            return Failure("database", result.error or "Race could not be saved")
        return Success(result.value)


class DeleteRace:
    def __init__(self, race_repo: RaceRepo):
        self.race_repo = race_repo

    def __call__(self, id: int) -> OperationResult:
        if self.race_repo.find(id) is None:
            return Failure("not_found", "Race not found")
        result = self.race_repo.try_delete(id)
        if not result.value:
            return Failure("foreign_key", f"Cannot delete race: {result.error}")
        logger.info(f"Race deleted: id={id}")
        return Success(True)
