from __future__ import annotations

from datetime import datetime

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.entities.user import UserRules
from race_logger.domain.types import EMAIL, FLEXIBLE_DATETIME, ROLE_NAME, Email, FlexibleDateTime, OptionalRoleName


class User(Struct, UserRules):
    """Full user struct. The password digest never leaves the repository."""

    id: int
    email_address: Email
    name: str = ""
    admin: bool = False
    role_id: int | None = None
    role_name: OptionalRoleName = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class UserSummary(Summary, UserRules):
    id: int
    email_address: str
    name: str
    admin: bool
    role_name: str | None
    created_at: datetime

    checks = {"email_address": EMAIL, "role_name": ROLE_NAME, "created_at": FLEXIBLE_DATETIME}
