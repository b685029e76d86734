"""Semantic types shared by contracts, structs and value objects.

Each type is a SemanticType: an optional coercion step followed by a check.
``validate(value)`` never raises and returns a TypeResult carrying either the
normalised value or an ErrorKind. ``annotated()`` turns the same rule into a
pydantic ``Annotated`` type so struct fields and contract params cannot drift
apart.

Canonical in-memory forms:
- bib numbers are ``int`` in 1..9999
- enumerations are exact, case-sensitive ``str`` members of a closed set
- date/times are timezone-aware UTC ``datetime``
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Annotated, Any, Literal, get_args
from urllib.parse import urlparse

from dateutil import parser as date_parser
from pydantic import BeforeValidator


class ErrorKind(str, Enum):
    """Why a value was rejected by a semantic type."""

    INVALID_FORMAT = "invalid_format"
    OUT_OF_RANGE = "out_of_range"
    NOT_IN_ENUM = "not_in_enum"
    UNPARSABLE_DATETIME = "unparsable_datetime"
    INVALID_TYPE = "invalid_type"


@dataclass(frozen=True)
class TypeResult:
    """Outcome of SemanticType.validate.

    Attributes:
        value: Normalised value (None when rejected)
        error: ErrorKind when rejected, None on success
        message: Human-readable reason when rejected
    """

    value: Any = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TypeCheckError(ValueError):
    """Raised inside coercion/check steps; converted to a TypeResult."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class SemanticType:
    """A named value rule: optional coercion, then validation."""

    def __init__(
        self,
        name: str,
        base: Any,
        check: Callable[[Any], Any],
        coerce: Callable[[Any], Any] | None = None,
    ):
        self.name = name
        self.base = base
        self._check = check
        self._coerce = coerce

    def __repr__(self) -> str:
        return f"SemanticType({self.name})"

    def validate(self, value: Any) -> TypeResult:
        try:
            if self._coerce is not None:
                value = self._coerce(value)
            return TypeResult(value=self._check(value))
        except TypeCheckError as e:
            return TypeResult(error=e.kind, message=e.message)

    def valid(self, value: Any) -> bool:
        return self.validate(value).ok

    def __call__(self, value: Any) -> Any:
        """Pydantic-compatible validator: returns the value or raises ValueError."""
        result = self.validate(value)
        if not result.ok:
            raise ValueError(result.message)
        return result.value

    def _optional(self, value: Any) -> Any:
        if value is None:
            return None
        return self(value)

    def annotated(self, *, optional: bool = False) -> Any:
        """Build a pydantic Annotated type running this rule before base validation."""
        if optional:
            return Annotated[self.base | None, BeforeValidator(self._optional)]
        return Annotated[self.base, BeforeValidator(self)]


# =============================================================================
# Closed value sets
# =============================================================================

RoleNameValue = Literal[
    "var_operator",
    "national_referee",
    "international_referee",
    "jury_president",
    "referee_manager",
    "broadcast_viewer",
]
IncidentStatusValue = Literal["unofficial", "official"]
DecisionTypeValue = Literal["pending", "penalty_applied", "rejected", "no_action"]
RaceStatusValue = Literal["scheduled", "in_progress", "completed", "cancelled"]
StageTypeValue = Literal["Qualification", "Heat", "Quarterfinal", "Semifinal", "Final"]
GenderCategoryValue = Literal["M", "W", "MM", "WW", "MW"]
GenderValue = Literal["M", "F"]
ParticipationStatusValue = Literal["registered", "dns", "dnf", "dsq", "finished"]
CourseSegmentValue = Literal[
    "uphill1",
    "uphill2",
    "uphill3",
    "transition_1to2",
    "transition_2to1",
    "descent",
    "footpart",
    "start_area",
    "finish_area",
]
SegmentPositionValue = Literal["start", "middle", "top", "bottom", "end", "full"]
ColorCodeValue = Literal["green", "red", "yellow", "blue", "gray"]

ROLE_NAMES: tuple[str, ...] = get_args(RoleNameValue)
INCIDENT_STATUSES: tuple[str, ...] = get_args(IncidentStatusValue)
DECISION_TYPES: tuple[str, ...] = get_args(DecisionTypeValue)
RACE_STATUSES: tuple[str, ...] = get_args(RaceStatusValue)
STAGE_TYPES: tuple[str, ...] = get_args(StageTypeValue)
GENDER_CATEGORIES: tuple[str, ...] = get_args(GenderCategoryValue)
GENDERS: tuple[str, ...] = get_args(GenderValue)
PARTICIPATION_STATUSES: tuple[str, ...] = get_args(ParticipationStatusValue)
COURSE_SEGMENTS: tuple[str, ...] = get_args(CourseSegmentValue)
SEGMENT_POSITIONS: tuple[str, ...] = get_args(SegmentPositionValue)
COLOR_CODES: tuple[str, ...] = get_args(ColorCodeValue)

# ISMF member federations, keyed by ISO 3166-1 alpha-3 code
ISMF_COUNTRIES: dict[str, str] = {
    "AND": "Andorra",
    "ARG": "Argentina",
    "ARM": "Armenia",
    "AUS": "Australia",
    "AUT": "Austria",
    "BEL": "Belgium",
    "BGR": "Bulgaria",
    "BIH": "Bosnia and Herzegovina",
    "BRA": "Brazil",
    "CAN": "Canada",
    "CHE": "Switzerland",
    "CHL": "Chile",
    "CHN": "China",
    "CZE": "Czechia",
    "DEU": "Germany",
    "DNK": "Denmark",
    "ESP": "Spain",
    "EST": "Estonia",
    "FIN": "Finland",
    "FRA": "France",
    "GBR": "United Kingdom",
    "GEO": "Georgia",
    "GRC": "Greece",
    "HRV": "Croatia",
    "HUN": "Hungary",
    "IND": "India",
    "IRL": "Ireland",
    "IRN": "Iran",
    "ISL": "Iceland",
    "ITA": "Italy",
    "JPN": "Japan",
    "KAZ": "Kazakhstan",
    "KGZ": "Kyrgyzstan",
    "KOR": "Korea",
    "LIE": "Liechtenstein",
    "LTU": "Lithuania",
    "LVA": "Latvia",
    "MKD": "North Macedonia",
    "MNE": "Montenegro",
    "MNG": "Mongolia",
    "NLD": "Netherlands",
    "NOR": "Norway",
    "NPL": "Nepal",
    "NZL": "New Zealand",
    "POL": "Poland",
    "PRT": "Portugal",
    "ROU": "Romania",
    "SRB": "Serbia",
    "SVK": "Slovakia",
    "SVN": "Slovenia",
    "SWE": "Sweden",
    "TUR": "Türkiye",
    "UKR": "Ukraine",
    "USA": "United States",
}


# =============================================================================
# Checks and coercions
# =============================================================================

EMAIL_REGEXP = re.compile(
    r"\A[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\Z"
)
UUID_REGEXP = re.compile(r"\A[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\Z", re.IGNORECASE)
COUNTRY_CODE_REGEXP = re.compile(r"\A[A-Z]{3}\Z")

BIB_NUMBER_MIN = 1
BIB_NUMBER_MAX = 9999


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeCheckError(ErrorKind.INVALID_TYPE, f"{name} must be a string")
    return value


def _format_check(name: str, pattern: re.Pattern[str], message: str) -> Callable[[Any], str]:
    def check(value: Any) -> str:
        text = _require_str(name, value)
        if not pattern.match(text):
            raise TypeCheckError(ErrorKind.INVALID_FORMAT, message)
        return text

    return check


def _check_strict_string(value: Any) -> str:
    text = _require_str("value", value)
    if len(text) < 1:
        raise TypeCheckError(ErrorKind.INVALID_FORMAT, "must be filled")
    return text


def _enum_check(name: str, values: tuple[str, ...]) -> Callable[[Any], str]:
    def check(value: Any) -> str:
        if not isinstance(value, str) or value not in values:
            raise TypeCheckError(ErrorKind.NOT_IN_ENUM, f"must be one of: {', '.join(values)}")
        return value

    return check


def coerce_integer(value: Any) -> int:
    """Coerce int-like input (int, integral float, digit string) to int."""
    if isinstance(value, bool):
        raise TypeCheckError(ErrorKind.INVALID_TYPE, "must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise TypeCheckError(ErrorKind.INVALID_TYPE, "must be an integer")
    if isinstance(value, str):
        text = value.strip()
        if re.fullmatch(r"[+-]?\d+", text):
            return int(text)
        raise TypeCheckError(ErrorKind.INVALID_TYPE, "must be an integer")
    # Value objects such as BibNumber expose __int__
    if hasattr(value, "__int__") and not isinstance(value, (str, bytes)):
        return int(value)
    raise TypeCheckError(ErrorKind.INVALID_TYPE, "must be an integer")


def _check_bib_number(value: int) -> int:
    if value < BIB_NUMBER_MIN or value > BIB_NUMBER_MAX:
        raise TypeCheckError(ErrorKind.OUT_OF_RANGE, f"must be between {BIB_NUMBER_MIN} and {BIB_NUMBER_MAX}")
    return value


def _check_country_code(value: Any) -> str:
    text = _require_str("country", value)
    if not COUNTRY_CODE_REGEXP.match(text):
        raise TypeCheckError(ErrorKind.INVALID_FORMAT, "must be a 3-letter country code (e.g., 'ITA', 'USA')")
    if text not in ISMF_COUNTRIES:
        raise TypeCheckError(ErrorKind.NOT_IN_ENUM, f"'{text}' is not a valid ISMF country code")
    return text


def coerce_datetime(value: Any) -> datetime:
    """Normalise datetime-like input to a timezone-aware UTC datetime.

    Accepts datetime (naive values are taken as UTC), date, epoch seconds and
    strings (ISO 8601 first, then python-dateutil's free-form parser).

    Raises:
        TypeCheckError: UNPARSABLE_DATETIME when nothing matches
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise TypeCheckError(ErrorKind.UNPARSABLE_DATETIME, f"cannot be parsed as a date/time: {e}") from e
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise TypeCheckError(ErrorKind.UNPARSABLE_DATETIME, "cannot be parsed as a date/time")
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = date_parser.parse(text)
            except (ValueError, OverflowError) as e:
                raise TypeCheckError(ErrorKind.UNPARSABLE_DATETIME, f"'{text}' cannot be parsed as a date/time") from e
        return coerce_datetime(parsed)
    raise TypeCheckError(ErrorKind.UNPARSABLE_DATETIME, "cannot be parsed as a date/time")


def coerce_date(value: Any) -> date:
    """Normalise date-like input to a date (datetimes are truncated in UTC)."""
    if isinstance(value, datetime):
        return coerce_datetime(value).date()
    if isinstance(value, date):
        return value
    return coerce_datetime(value).date()


def is_http_url(value: Any) -> bool:
    """True when value is an absolute http(s) URL with a host."""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme.lower() in {"http", "https"} and bool(parsed.netloc)


# =============================================================================
# Catalog
# =============================================================================

EMAIL = SemanticType("Email", str, _format_check("email", EMAIL_REGEXP, "must be a valid email address"))
UUID = SemanticType("UUID", str, _format_check("uuid", UUID_REGEXP, "must be a valid UUID"))
STRICT_STRING = SemanticType("StrictString", str, _check_strict_string)
BIB_NUMBER = SemanticType("BibNumber", int, _check_bib_number, coerce=coerce_integer)
COUNTRY_CODE = SemanticType("CountryCode", str, _check_country_code)
FLEXIBLE_DATETIME = SemanticType("FlexibleDateTime", datetime, lambda value: value, coerce=coerce_datetime)
FLEXIBLE_DATE = SemanticType("FlexibleDate", date, lambda value: value, coerce=coerce_date)

ROLE_NAME = SemanticType("RoleName", RoleNameValue, _enum_check("role_name", ROLE_NAMES))
INCIDENT_STATUS = SemanticType("IncidentStatus", IncidentStatusValue, _enum_check("status", INCIDENT_STATUSES))
DECISION_TYPE = SemanticType("DecisionType", DecisionTypeValue, _enum_check("decision", DECISION_TYPES))
RACE_STATUS = SemanticType("RaceStatus", RaceStatusValue, _enum_check("status", RACE_STATUSES))
STAGE_TYPE = SemanticType("StageType", StageTypeValue, _enum_check("stage_type", STAGE_TYPES))
GENDER_CATEGORY = SemanticType("GenderCategory", GenderCategoryValue, _enum_check("gender_category", GENDER_CATEGORIES))
GENDER = SemanticType("Gender", GenderValue, _enum_check("gender", GENDERS))
PARTICIPATION_STATUS = SemanticType(
    "ParticipationStatus", ParticipationStatusValue, _enum_check("status", PARTICIPATION_STATUSES)
)
COURSE_SEGMENT = SemanticType("CourseSegment", CourseSegmentValue, _enum_check("course_segment", COURSE_SEGMENTS))
SEGMENT_POSITION = SemanticType(
    "SegmentPosition", SegmentPositionValue, _enum_check("segment_position", SEGMENT_POSITIONS)
)
COLOR_CODE = SemanticType("ColorCode", ColorCodeValue, _enum_check("color_code", COLOR_CODES))

# Pydantic field types
Email = EMAIL.annotated()
UUIDString = UUID.annotated()
StrictString = STRICT_STRING.annotated()
BibNumber = BIB_NUMBER.annotated()
CountryCode = COUNTRY_CODE.annotated()
FlexibleDateTime = FLEXIBLE_DATETIME.annotated()
OptionalDateTime = FLEXIBLE_DATETIME.annotated(optional=True)
FlexibleDate = FLEXIBLE_DATE.annotated()
RoleName = ROLE_NAME.annotated()
OptionalRoleName = ROLE_NAME.annotated(optional=True)
IncidentStatus = INCIDENT_STATUS.annotated()
DecisionType = DECISION_TYPE.annotated()
RaceStatus = RACE_STATUS.annotated()
StageType = STAGE_TYPE.annotated()
GenderCategory = GENDER_CATEGORY.annotated()
Gender = GENDER.annotated()
ParticipationStatus = PARTICIPATION_STATUS.annotated()
CourseSegment = COURSE_SEGMENT.annotated()
SegmentPosition = SEGMENT_POSITION.annotated()
ColorCode = COLOR_CODE.annotated()
OptionalColorCode = COLOR_CODE.annotated(optional=True)
