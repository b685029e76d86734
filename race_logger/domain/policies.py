"""Actor authorization predicates.

A policy is built from an actor (a User or UserSummary struct, or None for
an anonymous caller) and the record being acted on. Every answer is computed
from struct fields alone; nothing here touches the database.
"""

from __future__ import annotations

from typing import Any


class ApplicationPolicy:
    """Denies everything; subclasses open up what their record allows."""

    def __init__(self, user: Any | None, record: Any | None = None):
        self.user = user
        self.record = record

    def index(self) -> bool:
        return False

    def show(self) -> bool:
        return False

    def create(self) -> bool:
        return False

    def update(self) -> bool:
        return False

    def destroy(self) -> bool:
        return False

    # Actor helpers. An anonymous caller holds no role.

    def _user_is(self, predicate: str) -> bool:
        return self.user is not None and bool(getattr(self.user, predicate)())

    def admin(self) -> bool:
        return self._user_is("is_admin")

    def referee(self) -> bool:
        return self._user_is("is_referee")

    def var_operator(self) -> bool:
        return self._user_is("is_var_operator")

    def jury_president(self) -> bool:
        return self._user_is("is_jury_president")

    def referee_manager(self) -> bool:
        return self._user_is("is_referee_manager")

    def broadcast_viewer(self) -> bool:
        return self._user_is("is_broadcast_viewer")

    def can_manage(self) -> bool:
        return self.admin() or self.jury_president() or self.referee_manager()


class IncidentPolicy(ApplicationPolicy):
    def index(self) -> bool:
        return True

    def show(self) -> bool:
        return True

    def create(self) -> bool:
        return self.referee() or self.var_operator() or self.can_manage()

    def update(self) -> bool:
        """Managers always; referees and VAR operators only while unofficial."""
        if self.can_manage():
            return True
        if not (self.referee() or self.var_operator()):
            return False
        return self.record is not None and self.record.is_unofficial()

    def destroy(self) -> bool:
        return self.admin() or self.referee_manager()

    def officialize(self) -> bool:
        return self.jury_president()

    def decide(self) -> bool:
        return self.jury_president()


class RacePolicy(ApplicationPolicy):
    def index(self) -> bool:
        return self.admin() or self.var_operator() or self.referee() or self.can_manage()

    def show(self) -> bool:
        return self.index()

    def create(self) -> bool:
        return self.admin() or self.var_operator()

    def update(self) -> bool:
        if not (self.admin() or self.var_operator()):
            return False
        return not (self.record is not None and self.record.is_completed())

    def destroy(self) -> bool:
        return self.admin() or self.var_operator()


class RaceLocationPolicy(ApplicationPolicy):
    def index(self) -> bool:
        return True

    def show(self) -> bool:
        return True

    def create(self) -> bool:
        return self.can_manage()

    def update(self) -> bool:
        return self.can_manage()

    def destroy(self) -> bool:
        """Only custom locations can be removed; standard ones come from templates."""
        if not (self.admin() or self.referee_manager()):
            return False
        return not (self.record is not None and self.record.is_standard)


class CompetitionPolicy(ApplicationPolicy):
    def index(self) -> bool:
        return True

    def show(self) -> bool:
        return True

    def create(self) -> bool:
        return self.can_manage()

    def update(self) -> bool:
        return self.can_manage()

    def destroy(self) -> bool:
        return self.referee_manager()


class ReportPolicy(ApplicationPolicy):
    def index(self) -> bool:
        return True

    def show(self) -> bool:
        return True

    def can_report(self) -> bool:
        return self.referee() or self.var_operator() or self.can_manage()

    def create(self) -> bool:
        return self.can_report()

    def owns_record(self) -> bool:
        return self.user is not None and self.record is not None and self.record.user_id == self.user.id

    def update(self) -> bool:
        return self.can_manage() or self.owns_record()

    def destroy(self) -> bool:
        return self.can_manage()
