"""Competition use cases."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from race_logger.db.repos import CompetitionRepo
from race_logger.domain.contracts import UpdateCompetition as CompetitionContract
from race_logger.operations.result import Failure, OperationResult, Success

EDITABLE_FIELDS = tuple(CompetitionContract.params)


def _normalise(params: Mapping[str, Any]) -> dict[str, Any]:
    attrs = dict(params)
    if isinstance(attrs.get("country"), str):
        attrs["country"] = attrs["country"].strip().upper()
    return attrs


class CreateCompetition:
    def __init__(self, competition_repo: CompetitionRepo):
        self.competition_repo = competition_repo
        self.contract = CompetitionContract()

    def __call__(self, params: Mapping[str, Any]) -> OperationResult:
        validation = self.contract.call(_normalise(params))
        if validation.failure:
            return Failure.from_validation(validation)

        result = self.competition_repo.try_create(validation.to_dict())
        if not result.ok:
            return Failure("database", result.error or "Competition could not be saved")
        logger.info(f"Competition created: id={result.value.id} name={result.value.name!r}")
        return Success(result.value)


class UpdateCompetition:
    """Apply a partial change; fields left out keep their stored value."""

    def __init__(self, competition_repo: CompetitionRepo):
        self.competition_repo = competition_repo
        self.contract = CompetitionContract()

    def __call__(self, id: int, params: Mapping[str, Any]) -> OperationResult:
        existing = self.competition_repo.find(id)
        if existing is None:
            return Failure("not_found", "Competition not found")

        current = {name: getattr(existing, name) for name in EDITABLE_FIELDS}
        validation = self.contract.call(_normalise({**current, **params}))
        if validation.failure:
            return Failure.from_validation(validation)

        result = self.competition_repo.try_update(id, validation.to_dict())
        if not result.ok:
            return Failure("database", result.error or "Competition could not be saved")
        return Success(result.value)


class DeleteCompetition:
    """Delete a competition; its races (and their locations) go with it."""

    def __init__(self, competition_repo: CompetitionRepo):
        self.competition_repo = competition_repo

    def __call__(self, id: int) -> OperationResult:
        if self.competition_repo.find(id) is None:
            return Failure("not_found", "Competition not found")
        result = self.competition_repo.try_delete(id)
        if not result.value:
            return Failure("delete_failed", result.error or "Competition could not be deleted")
        logger.info(f"Competition deleted: id={id}")
        return Success(True)
