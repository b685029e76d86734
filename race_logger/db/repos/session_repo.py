from __future__ import annotations

from sqlalchemy import Select, delete, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Session, SessionSummary


class SessionRepo(Repo[Session, SessionSummary]):
    """Sign-in sessions, newest first."""

    record_class = models.UserSession
    struct_class = Session
    summary_class = SessionSummary

    returns_one = ("create_for_user",)
    returns_many = ("for_user",)

    def base_scope(self) -> Select:
        return select(models.UserSession).order_by(models.UserSession.created_at.desc(), models.UserSession.id.desc())

    def create_for_user(self, user_id: int, ip_address: str | None = None, user_agent: str | None = None) -> Session | None:
        return self.create({"user_id": user_id, "ip_address": ip_address, "user_agent": user_agent})

    def for_user(self, user_id: int) -> list[SessionSummary]:
        return self.where(user_id=user_id)

    def delete_all_for_user(self, user_id: int) -> int:
        deleted = self.session.execute(delete(models.UserSession).where(models.UserSession.user_id == user_id)).rowcount
        self.session.commit()
        return deleted
