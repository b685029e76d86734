from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import FlexibleDateTime


class _RaceTypeKinds:
    __slots__ = ()

    def display_name(self) -> str:
        return self.name

    def is_sprint(self) -> bool:
        return self.name == "Sprint"

    def is_individual(self) -> bool:
        return self.name == "Individual"

    def is_team(self) -> bool:
        return self.name == "Team"

    def is_vertical(self) -> bool:
        return self.name == "Vertical"

    def is_relay(self) -> bool:
        return self.name == "Mixed Relay"


class RaceType(Struct, _RaceTypeKinds):
    id: int
    name: str
    description: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class RaceTypeSummary(Summary, _RaceTypeKinds):
    id: int
    name: str
    description: str | None
