from __future__ import annotations

from sqlalchemy import Select, or_, select

from race_logger.db import models
from race_logger.db.repo import Repo
from race_logger.db.structs import Athlete, AthleteSummary

Row = models.Athlete


class AthleteRepo(Repo[Athlete, AthleteSummary]):
    record_class = models.Athlete
    struct_class = Athlete
    summary_class = AthleteSummary

    returns_one = ("find_by_license", "find_by_name")
    returns_many = ("search", "by_country")

    def base_scope(self) -> Select:
        return select(Row).order_by(Row.last_name, Row.first_name, Row.id)

    def find_by_license(self, license_number: str) -> Athlete | None:
        return self.find_by(license_number=license_number)

    def find_by_name(self, first_name: str, last_name: str, gender: str, country: str) -> Athlete | None:
        return self.find_by(first_name=first_name, last_name=last_name, gender=gender, country=country)

    def find_or_create_by(
        self,
        first_name: str,
        last_name: str,
        gender: str,
        country: str,
        license_number: str | None = None,
    ) -> tuple[Athlete | None, bool]:
        """Athlete matched on name, gender and country, created when absent.

        Returns (athlete, created). athlete is None when creation was rejected.
        """
        existing = self.find_by_name(first_name, last_name, gender, country)
        if existing is not None:
            return existing, False
        created = self.create(
            {
                "first_name": first_name,
                "last_name": last_name,
                "gender": gender,
                "country": country,
                "license_number": license_number,
            }
        )
        return created, created is not None

    def search(self, query: str | None) -> list[AthleteSummary]:
        if not query or not query.strip():
            return []
        pattern = f"%{query.strip()}%"
        return self._many(self.base_scope().where(or_(Row.first_name.ilike(pattern), Row.last_name.ilike(pattern))))

    def by_country(self, country_code: str) -> list[AthleteSummary]:
        return self.where(country=country_code.upper())
