"""Incident workflow use cases.

Each step is checked three ways before anything is written:
1. the actor's policy (who may do it),
2. the incident's own transition predicates (whether it can happen now),
3. the incident contract over the resulting attributes.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from race_logger.db.repos import IncidentRepo, RaceRepo
from race_logger.db.structs import Incident, User
from race_logger.domain.contracts import IncidentContract
from race_logger.domain.policies import IncidentPolicy
from race_logger.operations.result import Failure, OperationResult, Success

WORKFLOW_FIELDS = (
    "race_id",
    "race_location_id",
    "status",
    "decision",
    "description",
    "officialized_by_user_id",
    "officialized_at",
    "decided_by_user_id",
    "decided_at",
    "decision_notes",
)


def _forbidden(action: str) -> Failure:
    return Failure("forbidden", f"You are not allowed to {action} this incident")


class _IncidentStep:
    def __init__(self, incident_repo: IncidentRepo, race_repo: RaceRepo | None = None):
        self.incident_repo = incident_repo
        lookups = {"race": (lambda id: race_repo.exists(id=id))} if race_repo is not None else {}
        self.contract = IncidentContract(lookups=lookups)

    def _apply(self, incident: Incident, changes: Mapping[str, Any]) -> OperationResult:
        """Validate the incident as it would be after ``changes``, then persist them."""
        proposed = {name: getattr(incident, name) for name in WORKFLOW_FIELDS}
        proposed.update(changes)
        proposed["previous_status"] = incident.status
        validation = self.contract.call(proposed)
        if validation.failure:
            return Failure.from_validation(validation)

        result = self.incident_repo.try_update(incident.id, dict(changes))
        if not result.ok:
            return Failure("database", result.error or "Incident could not be saved")
        return Success(result.value)


class CreateIncident(_IncidentStep):
    def __call__(self, actor: User | None, params: Mapping[str, Any]) -> OperationResult:
        if not IncidentPolicy(actor).create():
            return _forbidden("create")

        validation = self.contract.call({"status": "unofficial", "decision": "pending", **params})
        if validation.failure:
            return Failure.from_validation(validation)

        attrs = validation.to_dict()
        attrs.pop("previous_status", None)
        result = self.incident_repo.try_create(attrs)
        if not result.ok:
            return Failure("database", result.error or "Incident could not be saved")
        logger.info(f"Incident {result.value.id} created for race {result.value.race_id}")
        return Success(result.value)


class OfficializeIncident(_IncidentStep):
    def __call__(self, actor: User | None, incident_id: int, now: datetime | None = None) -> OperationResult:
        incident = self.incident_repo.find(incident_id)
        if incident is None:
            return Failure("not_found", "Incident not found")
        if not IncidentPolicy(actor, incident).officialize():
            return _forbidden("officialize")
        if not incident.can_officialize():
            return Failure("invalid_transition", "Incident is already official")

        result = self._apply(
            incident,
            {
                "status": "official",
                "officialized_by_user_id": actor.id,
                "officialized_at": now or datetime.now(timezone.utc),
            },
        )
        if result.success:
            logger.info(f"Incident {incident_id} officialized by user {actor.id}")
        return result


class DecideIncident(_IncidentStep):
    def __call__(
        self,
        actor: User | None,
        incident_id: int,
        decision: str,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> OperationResult:
        incident = self.incident_repo.find(incident_id)
        if incident is None:
            return Failure("not_found", "Incident not found")
        if not IncidentPolicy(actor, incident).decide():
            return _forbidden("decide on")
        if decision == "pending":
            return Failure("validation_failed", "Invalid attributes: decision", errors={"decision": ["must not be pending"]})
        if incident.is_unofficial():
            return Failure("invalid_transition", "Incident must be official before a decision is taken")
        if not incident.can_decide():
            return Failure("invalid_transition", f"Incident already decided ({incident.decision})")

        result = self._apply(
            incident,
            {
                "decision": decision,
                "decided_by_user_id": actor.id,
                "decided_at": now or datetime.now(timezone.utc),
                "decision_notes": notes,
            },
        )
        if result.success:
            logger.info(f"Incident {incident_id} decided as {decision} by user {actor.id}")
        return result
