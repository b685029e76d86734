"""Field report submission."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from race_logger.db.repos import RaceRepo, ReportRepo
from race_logger.db.structs import User
from race_logger.domain.contracts import ReportContract
from race_logger.domain.policies import ReportPolicy
from race_logger.operations.result import Failure, OperationResult, Success


class CreateReport:
    """Store a report from a referee device.

    Resubmitting a report with a known ``client_uuid`` returns the stored
    report instead of creating a second one.
    """

    def __init__(self, report_repo: ReportRepo, race_repo: RaceRepo | None = None):
        self.report_repo = report_repo
        lookups = {"race": (lambda id: race_repo.exists(id=id))} if race_repo is not None else {}
        self.contract = ReportContract(lookups=lookups)

    def __call__(self, actor: User | None, params: Mapping[str, Any]) -> OperationResult:
        if not ReportPolicy(actor).create():
            return Failure("forbidden", "You are not allowed to submit reports")

        client_uuid = params.get("client_uuid")
        if isinstance(client_uuid, str) and client_uuid:
            existing = self.report_repo.find_by_client_uuid(client_uuid)
            if existing is not None:
                logger.info(f"Report {client_uuid} already stored as id={existing.id}, skipping")
                return Success(existing)

        validation = self.contract.call({**params, "user_id": actor.id})
        if validation.failure:
            return Failure.from_validation(validation)

        result = self.report_repo.try_create(validation.to_dict())
        if not result.ok:
            return Failure("database", result.error or "Report could not be saved")
        logger.info(f"Report {result.value.client_uuid} stored for race {result.value.race_id} bib {result.value.bib_number}")
        return Success(result.value)
