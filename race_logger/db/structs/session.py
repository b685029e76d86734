"""Login session structs (a persisted sign-in, not a database session)."""

from __future__ import annotations

from datetime import datetime

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import FLEXIBLE_DATETIME, FlexibleDateTime


class Session(Struct):
    id: int
    user_id: int
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class SessionSummary(Summary):
    id: int
    user_id: int
    created_at: datetime

    checks = {"created_at": FLEXIBLE_DATETIME}
