"""Race locations and the per-race-type templates they are copied from."""

from __future__ import annotations

from race_logger.db.struct import Struct, Summary, summary_struct
from race_logger.domain.types import (
    COLOR_CODE,
    COURSE_SEGMENT,
    SEGMENT_POSITION,
    CourseSegment,
    FlexibleDateTime,
    OptionalColorCode,
    SegmentPosition,
)

_SUMMARY_CHECKS = {
    "course_segment": COURSE_SEGMENT,
    "segment_position": SEGMENT_POSITION,
    "color_code": COLOR_CODE,
}


class _LocationDisplay:
    __slots__ = ()

    def is_custom(self) -> bool:
        return not self.is_standard

    def segment_display(self) -> str:
        return self.course_segment.replace("_", " → ").title()

    def position_display(self) -> str:
        return self.segment_position.title()

    def display_name_with_segment(self) -> str:
        return f"{self.name} ({self.course_segment.replace('_', ' ').title()})"


class RaceTypeLocationTemplate(Struct, _LocationDisplay):
    id: int
    race_type_id: int
    name: str
    course_segment: CourseSegment
    segment_position: SegmentPosition
    display_order: int
    is_standard: bool = False
    color_code: OptionalColorCode = None
    description: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class LocationTemplateSummary(Summary, _LocationDisplay):
    id: int
    race_type_id: int
    name: str
    course_segment: str
    segment_position: str
    display_order: int
    is_standard: bool
    color_code: str | None

    checks = _SUMMARY_CHECKS


class RaceLocation(Struct, _LocationDisplay):
    """Camera/observer position on one race's course."""

    id: int
    race_id: int
    name: str
    course_segment: CourseSegment
    segment_position: SegmentPosition
    display_order: int
    is_standard: bool = False
    color_code: OptionalColorCode = None
    description: str | None = None
    created_at: FlexibleDateTime
    updated_at: FlexibleDateTime


@summary_struct
class RaceLocationSummary(Summary, _LocationDisplay):
    id: int
    race_id: int
    name: str
    course_segment: str
    segment_position: str
    display_order: int
    is_standard: bool
    color_code: str | None

    checks = _SUMMARY_CHECKS
