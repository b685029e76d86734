"""Contracts for creating and editing races."""

from __future__ import annotations

from race_logger.domain.contracts.base import Contract, RuleContext, optional, required, rule
from race_logger.domain.types import GENDER_CATEGORIES, FlexibleDateTime, RaceStatus, StageType

GENDER_CATEGORY_MESSAGE = "must be one of: M (Men), W (Women), MM (Men's Team), WW (Women's Team), MW (Mixed Team)"
MIN_HEAT_NUMBER = 1
MAX_HEAT_NUMBER = 10


def _check_heat_number(ctx: RuleContext) -> None:
    heat_number = ctx.values.get("heat_number")
    if heat_number is not None and not MIN_HEAT_NUMBER <= heat_number <= MAX_HEAT_NUMBER:
        ctx.failure("heat_number", f"must be between {MIN_HEAT_NUMBER} and {MAX_HEAT_NUMBER}")


class CreateRace(Contract):
    params = {
        "competition_id": required(int),
        "race_type_id": required(int),
        "name": required(str, min_length=3, max_length=255),
        "stage_type": required(StageType),
        "gender_category": required(str),
        "heat_number": optional(int),
        "scheduled_at": optional(FlexibleDateTime),
    }

    @rule("gender_category")
    def gender_category_in_set(self, ctx: RuleContext) -> None:
        if ctx.values["gender_category"] not in GENDER_CATEGORIES:
            ctx.failure("gender_category", GENDER_CATEGORY_MESSAGE)

    @rule("heat_number")
    def heat_number_range(self, ctx: RuleContext) -> None:
        _check_heat_number(ctx)

    @rule("competition_id")
    def competition_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("competition_id", "competition", "competition not found")

    @rule("race_type_id")
    def race_type_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_type_id", "race_type", "race type not found")


class UpdateRace(Contract):
    """Every key optional; a key that is present must be valid."""

    params = {
        "name": optional(str, filled=True, min_length=3, max_length=255),
        "stage_type": optional(StageType, filled=True),
        "heat_number": optional(int),
        "scheduled_at": optional(FlexibleDateTime),
        "position": optional(int, filled=True, gte=0),
        "status": optional(RaceStatus, filled=True),
    }

    @rule("heat_number")
    def heat_number_range(self, ctx: RuleContext) -> None:
        _check_heat_number(ctx)
