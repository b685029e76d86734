from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import ROLE_NAME, FlexibleDateTime, RoleName
from race_logger.domain.value_objects.user_role import UserRole


class Role(Struct):
    id: int
    name: RoleName
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime

    def as_user_role(self) -> UserRole:
        return UserRole(self.name)


@summary_struct
class RoleSummary(Summary):
    id: int
    name: str

    checks = {"name": ROLE_NAME}
