"""Bulk athlete import contract."""

from __future__ import annotations

from collections import Counter

from race_logger.domain.contracts.base import Contract, FailureKind, RuleContext, optional, required, rule
from race_logger.domain.types import (
    BIB_NUMBER_MAX,
    BIB_NUMBER_MIN,
    COUNTRY_CODE_REGEXP,
    GENDERS,
    ISMF_COUNTRIES,
)

DUPLICATE_BIBS_PREFIX = "duplicate bib numbers found"


class ImportedAthlete(Contract):
    """One row of an import file."""

    params = {
        "bib_number": required(int),
        "first_name": required(str),
        "last_name": required(str),
        "gender": required(str),
        "country": required(str),
        "license_number": optional(str),
    }

    @rule("gender")
    def gender_in_set(self, ctx: RuleContext) -> None:
        if ctx.values["gender"] not in GENDERS:
            ctx.failure("gender", "must be 'M' or 'F'")

    @rule("country")
    def country_code(self, ctx: RuleContext) -> None:
        country = ctx.values["country"]
        if not COUNTRY_CODE_REGEXP.match(country):
            ctx.failure("country", "must be a 3-letter country code (e.g., 'ITA', 'USA')")
        if country not in ISMF_COUNTRIES:
            ctx.failure("country", f"'{country}' is not a valid ISMF country code")

    @rule("bib_number")
    def bib_range(self, ctx: RuleContext) -> None:
        if not BIB_NUMBER_MIN <= ctx.values["bib_number"] <= BIB_NUMBER_MAX:
            ctx.failure("bib_number", f"bib number must be between {BIB_NUMBER_MIN} and {BIB_NUMBER_MAX}")


class BulkImportAthletes(Contract):
    """Race id plus a non-empty array of athletes with unique bib numbers.

    Duplicate bibs inside the array are reported as a CROSS_FIELD failure on
    ``athletes`` so callers can tell them apart from malformed rows.
    """

    params = {
        "race_id": required(int),
        "athletes": required(list, each=ImportedAthlete),
    }

    @rule("race_id")
    def race_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_id", "race", "race not found")

    @rule("athletes")
    def not_empty(self, ctx: RuleContext) -> None:
        if not ctx.values["athletes"]:
            ctx.failure("athletes", "must contain at least one athlete")

    @rule("athletes")
    def unique_bibs(self, ctx: RuleContext) -> None:
        counts = Counter(row["bib_number"] for row in ctx.values["athletes"] if row.get("bib_number") is not None)
        duplicates = [str(bib) for bib, count in counts.items() if count > 1]
        if duplicates:
            ctx.failure("athletes", f"{DUPLICATE_BIBS_PREFIX}: {', '.join(duplicates)}", FailureKind.CROSS_FIELD)
