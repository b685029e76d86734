"""User persistence.

create/update accept ``role_name`` (translated to ``role_id``) and a raw
``password`` (stored as a bcrypt digest). The digest never reaches a struct.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, or_, select

from race_logger.core.errors import RecordInvalidError
from race_logger.core.password import hash_password, verify_password
from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import User, UserSummary

REFEREE_ROLES = ("national_referee", "international_referee")


class UserRepo(Repo[User, UserSummary]):
    record_class = models.User
    struct_class = User
    summary_class = UserSummary

    returns_one = ("find_by_email", "authenticate")
    returns_many = ("admins", "referees", "with_role", "search")

    def base_scope(self) -> Select:
        return (
            select(models.User, models.Role.name.label("role_name"))
            .outerjoin(models.Role, models.User.role_id == models.Role.id)
            .order_by(models.User.created_at.desc(), models.User.id.desc())
        )

    def prepare_attributes(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        values = dict(attributes)
        if "role_name" in values:
            role_name = values.pop("role_name")
            if role_name is None:
                values["role_id"] = None
            else:
                role_id = self.session.scalar(select(models.Role.id).where(models.Role.name == role_name))
                if role_id is None:
                    raise RecordInvalidError("User", "role_name", f"role '{role_name}' does not exist")
                values["role_id"] = role_id
        if "password" in values:
            password = values.pop("password")
            if not password:
                raise RecordInvalidError("User", "password", "can't be blank")
            values["password_digest"] = hash_password(password)
        return values

    def find_by_email(self, email: str) -> User | None:
        return self.find_by(email_address=email)

    def authenticate(self, email: str, password: str) -> User | None:
        """User for valid credentials, None otherwise (unknown email included)."""
        record = self.session.scalar(select(models.User).where(models.User.email_address == email))
        if record is None or not verify_password(password, record.password_digest):
            return None
        return self.find(record.id)

    def admins(self) -> list[UserSummary]:
        return self._many(self.base_scope().where(models.User.admin.is_(True)))

    def referees(self) -> list[UserSummary]:
        return self._many(self.base_scope().where(models.Role.name.in_(REFEREE_ROLES)))

    def with_role(self, role_name: str) -> list[UserSummary]:
        return self._many(self.base_scope().where(models.Role.name == role_name))

    def search(self, query: str | None) -> list[UserSummary]:
        if not query or not query.strip():
            return []
        pattern = f"%{query.strip()}%"
        return self._many(
            self.base_scope().where(or_(models.User.email_address.ilike(pattern), models.User.name.ilike(pattern)))
        )

    def email_exists(self, email: str) -> bool:
        return self.exists(email_address=email)
