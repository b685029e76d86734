"""Magic sign-in links.

A link is valid while it is unused and its expiry lies in the future.
Time-dependent queries take an optional ``now`` so callers and tests can pin
the clock.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import Select, delete, select

from race_logger.config.settings import settings
from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import MagicLink, MagicLinkSummary


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


class MagicLinkRepo(Repo[MagicLink, MagicLinkSummary]):
    record_class = models.MagicLink
    struct_class = MagicLink
    summary_class = MagicLinkSummary

    returns_one = ("find_by_token", "find_valid_by_token", "create_for_user", "mark_as_used")
    returns_many = ("for_user", "active_for_user", "expired", "used")

    def base_scope(self) -> Select:
        return select(models.MagicLink).order_by(models.MagicLink.created_at.desc(), models.MagicLink.id.desc())

    def _active(self, now: datetime | None) -> Select:
        return self.base_scope().where(models.MagicLink.expires_at > _now(now), models.MagicLink.used_at.is_(None))

    def find_by_token(self, token: str) -> MagicLink | None:
        return self.find_by(token=token)

    def find_valid_by_token(self, token: str, now: datetime | None = None) -> MagicLink | None:
        return self._one(self._active(now).where(models.MagicLink.token == token))

    def create_for_user(self, user_id: int, expires_in: timedelta | None = None) -> MagicLink | None:
        expires_in = expires_in or timedelta(hours=settings.magic_link_expiration_hours)
        link = self.create(
            {
                "user_id": user_id,
                "token": secrets.token_urlsafe(32),
                "expires_at": datetime.now(timezone.utc) + expires_in,
            }
        )
        if link is not None:
            logger.info(f"Magic link issued for user {user_id}, expires {link.expires_at.isoformat()}")
        return link

    def mark_as_used(self, id: int, now: datetime | None = None) -> MagicLink | None:
        return self.update(id, {"used_at": _now(now)})

    def for_user(self, user_id: int) -> list[MagicLinkSummary]:
        return self.where(user_id=user_id)

    def active_for_user(self, user_id: int, now: datetime | None = None) -> list[MagicLinkSummary]:
        return self._many(self._active(now).where(models.MagicLink.user_id == user_id))

    def expired(self, now: datetime | None = None) -> list[MagicLinkSummary]:
        return self._many(self.base_scope().where(models.MagicLink.expires_at <= _now(now)))

    def used(self) -> list[MagicLinkSummary]:
        return self._many(self.base_scope().where(models.MagicLink.used_at.is_not(None)))

    def delete_expired(self, now: datetime | None = None) -> int:
        deleted = self.session.execute(delete(models.MagicLink).where(models.MagicLink.expires_at <= _now(now))).rowcount
        self.session.commit()
        logger.info(f"Deleted {deleted} expired magic links")
        return deleted

    def delete_all_for_user(self, user_id: int) -> int:
        deleted = self.session.execute(delete(models.MagicLink).where(models.MagicLink.user_id == user_id)).rowcount
        self.session.commit()
        return deleted

    def has_active_link(self, user_id: int, now: datetime | None = None) -> bool:
        stmt = (
            select(models.MagicLink.id)
            .where(
                models.MagicLink.user_id == user_id,
                models.MagicLink.expires_at > _now(now),
                models.MagicLink.used_at.is_(None),
            )
            .limit(1)
        )
        return self.session.scalar(stmt) is not None
