from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import COUNTRY_CODE, GENDER, CountryCode, Gender, OptionalDateTime


class _AthleteNames:
    __slots__ = ()

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name.upper()} ({self.country})"

    def is_male(self) -> bool:
        return self.gender == "M"

    def is_female(self) -> bool:
        return self.gender == "F"


class Athlete(Struct, _AthleteNames):
    id: int
    first_name: str
    last_name: str
    country: CountryCode
    gender: Gender
    license_number: str | None = None
    created_at: OptionalDateTime = None
    updated_at: OptionalDateTime = None


@summary_struct
class AthleteSummary(Summary, _AthleteNames):
    id: int
    first_name: str
    last_name: str
    country: str
    gender: str
    license_number: str | None

    checks = {"country": COUNTRY_CODE, "gender": GENDER}


