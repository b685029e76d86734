"""Contracts for race locations and their per-race-type templates."""

from __future__ import annotations

from race_logger.domain.contracts.base import Contract, RuleContext, optional, required, rule
from race_logger.domain.types import CourseSegment, SegmentPosition

# Colors offered when placing a location; blue/gray are reserved for imported data
SELECTABLE_COLORS = ("green", "red", "yellow")


class _LocationFields(Contract):
    params = {
        "name": required(str),
        "course_segment": required(CourseSegment),
        "segment_position": required(SegmentPosition),
        "display_order": optional(int),
        "color_code": optional(str),
        "description": optional(str),
    }

    @rule("color_code")
    def color_in_set(self, ctx: RuleContext) -> None:
        color = ctx.values.get("color_code")
        if color is not None and color not in SELECTABLE_COLORS:
            ctx.failure("color_code", f"must be one of: {', '.join(SELECTABLE_COLORS)}")

    @rule("display_order")
    def display_order_positive(self, ctx: RuleContext) -> None:
        display_order = ctx.values.get("display_order")
        if display_order is not None and display_order <= 0:
            ctx.failure("display_order", "must be a positive integer")


class CreateRaceLocation(_LocationFields):
    params = {"race_id": required(int), **_LocationFields.params}

    @rule("race_id")
    def race_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_id", "race", "must be a valid race")


class CreateLocationTemplate(_LocationFields):
    params = {
        "race_type_id": required(int),
        **_LocationFields.params,
        "is_standard": optional(bool),
    }

    @rule("race_type_id")
    def race_type_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_type_id", "race_type", "race type not found")
