"""Incident workflow contract.

Two independent axes: status (unofficial -> official, one way) and decision
(pending -> penalty_applied | rejected | no_action). A decision may only be
taken once the incident is official.
"""

from __future__ import annotations

from race_logger.domain.contracts.base import Contract, FailureKind, RuleContext, optional, required, rule
from race_logger.domain.types import DECISION_TYPES, INCIDENT_STATUSES, FlexibleDateTime
from race_logger.domain.value_objects.incident_status import IncidentStatusValue

MAX_DECISION_NOTES_LENGTH = 5000


class IncidentContract(Contract):
    """Validates incident attributes before a create or workflow update.

    ``previous_status`` is optional: pass the stored status when updating so
    the one-way status transition is enforced here as well as by the entity.
    """

    params = {
        "race_id": required(int),
        "status": required(str),
        "decision": required(str),
        "previous_status": optional(str),
        "race_location_id": optional(int),
        "officialized_by_user_id": optional(int),
        "decided_by_user_id": optional(int),
        "officialized_at": optional(FlexibleDateTime),
        "decided_at": optional(FlexibleDateTime),
        "decision_notes": optional(str),
        "description": optional(str),
    }

    @rule("race_id")
    def race_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_id", "race", "race not found")

    @rule("status")
    def status_in_set(self, ctx: RuleContext) -> None:
        if ctx.values["status"] not in INCIDENT_STATUSES:
            ctx.failure("status", "must be either 'unofficial' or 'official'")

    @rule("decision")
    def decision_in_set(self, ctx: RuleContext) -> None:
        if ctx.values["decision"] not in DECISION_TYPES:
            ctx.failure("decision", f"must be one of: {', '.join(DECISION_TYPES)}")

    @rule("decision", "decided_by_user_id")
    def decider_required(self, ctx: RuleContext) -> None:
        if ctx.values["decision"] != "pending" and not ctx.has("decided_by_user_id"):
            ctx.failure("decided_by_user_id", "must be present when decision is not pending")

    @rule("decision", "decided_at")
    def decision_time_required(self, ctx: RuleContext) -> None:
        if ctx.values["decision"] != "pending" and not ctx.has("decided_at"):
            ctx.failure("decided_at", "must be present when decision is not pending")

    @rule("status", "officialized_by_user_id")
    def officializer_required(self, ctx: RuleContext) -> None:
        if ctx.values["status"] == "official" and not ctx.has("officialized_by_user_id"):
            ctx.failure("officialized_by_user_id", "must be present when status is official")

    @rule("status", "officialized_at")
    def officialization_time_required(self, ctx: RuleContext) -> None:
        if ctx.values["status"] == "official" and not ctx.has("officialized_at"):
            ctx.failure("officialized_at", "must be present when status is official")

    @rule("status", "decision")
    def decision_requires_official(self, ctx: RuleContext) -> None:
        if ctx.values["decision"] != "pending" and ctx.values["status"] != "official":
            ctx.failure("decision", "can only be set once the incident is official")

    @rule("decision_notes")
    def notes_length(self, ctx: RuleContext) -> None:
        notes = ctx.values.get("decision_notes")
        if notes and len(notes) > MAX_DECISION_NOTES_LENGTH:
            ctx.failure("decision_notes", "is too long (maximum 5,000 characters)")

    @rule("officialized_at", "decided_at")
    def decision_after_officialization(self, ctx: RuleContext) -> None:
        officialized_at = ctx.values.get("officialized_at")
        decided_at = ctx.values.get("decided_at")
        if officialized_at and decided_at and decided_at < officialized_at:
            ctx.failure("decided_at", "cannot be before officialization date")

    @rule("previous_status", "status")
    def status_transition(self, ctx: RuleContext) -> None:
        previous = ctx.values.get("previous_status")
        status = ctx.values["status"]
        if previous is None or previous == status or previous not in INCIDENT_STATUSES:
            return
        if status in INCIDENT_STATUSES and not IncidentStatusValue(previous).can_transition_to(status):
            ctx.failure("status", f"cannot change from {previous} to {status}", FailureKind.CROSS_FIELD)
