from __future__ import annotations

from sqlalchemy import Select, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Role, RoleSummary


class RoleRepo(Repo[Role, RoleSummary]):
    record_class = models.Role
    struct_class = Role
    summary_class = RoleSummary

    returns_one = ("find_by_name",)

    def base_scope(self) -> Select:
        return select(models.Role).order_by(models.Role.name)

    def find_by_name(self, name: str) -> Role | None:
        return self.find_by(name=name)

    def name_exists(self, name: str) -> bool:
        return self.exists(name=name)

    def all_names(self) -> list[str]:
        return list(self.session.scalars(select(models.Role.name).order_by(models.Role.name)))
