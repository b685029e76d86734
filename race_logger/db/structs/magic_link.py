from __future__ import annotations

from datetime import datetime, timezone

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import FLEXIBLE_DATETIME, FlexibleDateTime, OptionalDateTime


class _MagicLinkState:
    __slots__ = ()

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(timezone.utc))

    def is_used(self) -> bool:
        return self.used_at is not None

    def is_valid_for_use(self, now: datetime | None = None) -> bool:
        return not self.is_used() and not self.is_expired(now)


class MagicLink(Struct, _MagicLinkState):
    """Single-use passwordless sign-in token."""

    id: int
    user_id: int
    token: str
    expires_at: OptionalDateTime = None
    used_at: OptionalDateTime = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class MagicLinkSummary(Summary, _MagicLinkState):
    id: int
    user_id: int
    expires_at: datetime | None
    used_at: datetime | None

    checks = {"expires_at": FLEXIBLE_DATETIME, "used_at": FLEXIBLE_DATETIME}
