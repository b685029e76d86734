"""User role value object."""

from __future__ import annotations

from race_logger.domain.types import ROLE_NAME, ROLE_NAMES

# Higher level means broader authority
ROLE_HIERARCHY: dict[str, int] = {
    "broadcast_viewer": 0,
    "var_operator": 1,
    "national_referee": 2,
    "international_referee": 3,
    "jury_president": 4,
    "referee_manager": 5,
}


class UserRole:
    """Wraps a role name and answers authority questions about it."""

    __slots__ = ("_name",)

    def __init__(self, name: str):
        result = ROLE_NAME.validate(name)
        if not result.ok:
            raise ValueError(f"Invalid role {name!r}: {result.message}")
        self._name: str = result.value

    @classmethod
    def var_operator_role(cls) -> UserRole:
        return cls("var_operator")

    @classmethod
    def national_referee_role(cls) -> UserRole:
        return cls("national_referee")

    @classmethod
    def international_referee_role(cls) -> UserRole:
        return cls("international_referee")

    @classmethod
    def jury_president_role(cls) -> UserRole:
        return cls("jury_president")

    @classmethod
    def referee_manager_role(cls) -> UserRole:
        return cls("referee_manager")

    @classmethod
    def broadcast_viewer_role(cls) -> UserRole:
        return cls("broadcast_viewer")

    @staticmethod
    def all_roles() -> tuple[str, ...]:
        return ROLE_NAMES

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> int:
        return ROLE_HIERARCHY[self._name]

    def higher_than(self, other: UserRole | str) -> bool:
        other_role = other if isinstance(other, UserRole) else UserRole(other)
        return self.level > other_role.level

    @property
    def var_operator(self) -> bool:
        return self._name == "var_operator"

    @property
    def national_referee(self) -> bool:
        return self._name == "national_referee"

    @property
    def international_referee(self) -> bool:
        return self._name == "international_referee"

    @property
    def jury_president(self) -> bool:
        return self._name == "jury_president"

    @property
    def referee_manager(self) -> bool:
        return self._name == "referee_manager"

    @property
    def broadcast_viewer(self) -> bool:
        return self._name == "broadcast_viewer"

    @property
    def referee(self) -> bool:
        return self.national_referee or self.international_referee

    @property
    def can_officialize(self) -> bool:
        return self.referee or self.referee_manager or self.jury_president

    @property
    def can_decide(self) -> bool:
        return self.international_referee or self.referee_manager or self.jury_president

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"UserRole({self._name!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserRole):
            return self._name == other._name
        if isinstance(other, str):
            return self._name == other
        return False

    def __hash__(self) -> int:
        return hash(self._name)
