"""Incident workflow predicates.

Status axis: unofficial -> official (terminal). Decision axis: pending ->
penalty_applied | rejected | no_action, only once official.
"""

from __future__ import annotations

from typing import Any

from race_logger.domain.value_objects.incident_status import IncidentStatusValue


class IncidentRules:
    """Mixed into the Incident struct; reads only the struct's own fields."""

    __slots__ = ()

    def status_value(self) -> IncidentStatusValue:
        return IncidentStatusValue(self.status)

    def is_unofficial(self) -> bool:
        return self.status == "unofficial"

    def is_official(self) -> bool:
        return self.status == "official"

    def is_pending(self) -> bool:
        return self.decision == "pending"

    def is_decided(self) -> bool:
        return not self.is_pending()

    def is_penalty_applied(self) -> bool:
        return self.decision == "penalty_applied"

    def is_rejected(self) -> bool:
        return self.decision == "rejected"

    def is_no_action(self) -> bool:
        return self.decision == "no_action"

    def can_officialize(self) -> bool:
        return self.is_unofficial()

    def can_decide(self) -> bool:
        return self.is_official() and self.is_pending()

    def can_be_merged(self) -> bool:
        return self.is_unofficial()

    def can_transition_to(self, new_status: str) -> bool:
        return new_status == self.status or self.status_value().can_transition_to(new_status)

    def requires_decision(self) -> bool:
        return self.is_official() and self.is_pending()

    def is_workflow_complete(self) -> bool:
        return self.is_official() and self.is_decided()

    def officialized_by(self, user: Any) -> bool:
        return self.officialized_by_user_id is not None and self.officialized_by_user_id == user.id

    def decided_by(self, user: Any) -> bool:
        return self.decided_by_user_id is not None and self.decided_by_user_id == user.id
