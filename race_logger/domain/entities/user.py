"""User role predicates, shared by the full and summary user structs."""

from __future__ import annotations

from race_logger.domain.value_objects.user_role import UserRole


class UserRules:
    __slots__ = ()

    def display_name(self) -> str:
        return self.name or self.email_address.split("@")[0]

    def role(self) -> UserRole | None:
        return UserRole(self.role_name) if self.role_name else None

    def is_admin(self) -> bool:
        return self.admin is True

    def has_role(self, role_name: str) -> bool:
        return self.role_name == str(role_name)

    def is_var_operator(self) -> bool:
        return self.role_name == "var_operator"

    def is_national_referee(self) -> bool:
        return self.role_name == "national_referee"

    def is_international_referee(self) -> bool:
        return self.role_name == "international_referee"

    def is_jury_president(self) -> bool:
        return self.role_name == "jury_president"

    def is_referee_manager(self) -> bool:
        return self.role_name == "referee_manager"

    def is_broadcast_viewer(self) -> bool:
        return self.role_name == "broadcast_viewer"

    def is_referee(self) -> bool:
        return self.is_national_referee() or self.is_international_referee()

    def can_officialize_incident(self) -> bool:
        return self.is_admin() or self.is_referee() or self.is_referee_manager()

    def can_decide_incident(self) -> bool:
        return self.is_admin() or self.is_referee_manager() or self.is_international_referee()

    def can_merge_incidents(self) -> bool:
        return self.is_admin() or self.is_referee_manager()

    def can_manage_users(self) -> bool:
        return self.is_admin()
