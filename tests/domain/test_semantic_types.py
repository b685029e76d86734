"""Tests for the semantic type catalog.

Covers coercion to canonical forms and the ErrorKind reported for each kind
of rejection.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import BaseModel, ValidationError

from race_logger.domain.types import (
    BIB_NUMBER,
    COUNTRY_CODE,
    EMAIL,
    FLEXIBLE_DATE,
    FLEXIBLE_DATETIME,
    RACE_STATUS,
    STAGE_TYPE,
    STRICT_STRING,
    UUID,
    BibNumber,
    ErrorKind,
    OptionalDateTime,
    is_http_url,
)


class TestBibNumber:
    """Bib numbers are integers in 1..9999."""

    @pytest.mark.parametrize("value", [1, 42, 9999, "42", " 7 ", 12.0])
    def test_accepts_int_like_values(self, value) -> None:
        result = BIB_NUMBER.validate(value)
        assert result.ok
        assert isinstance(result.value, int)

    @pytest.mark.parametrize("value", [0, -3, 10000])
    def test_rejects_out_of_range(self, value) -> None:
        result = BIB_NUMBER.validate(value)
        assert result.error is ErrorKind.OUT_OF_RANGE
        assert result.message == "must be between 1 and 9999"

    @pytest.mark.parametrize("value", ["abc", 1.5, True, None, [1]])
    def test_rejects_non_integers(self, value) -> None:
        assert BIB_NUMBER.validate(value).error is ErrorKind.INVALID_TYPE


class TestEnumerations:
    def test_exact_member_passes(self) -> None:
        assert STAGE_TYPE.validate("Final").value == "Final"

    def test_matching_is_case_sensitive(self) -> None:
        result = STAGE_TYPE.validate("final")
        assert result.error is ErrorKind.NOT_IN_ENUM
        assert result.message == "must be one of: Qualification, Heat, Quarterfinal, Semifinal, Final"

    def test_race_status_set(self) -> None:
        for status in ("scheduled", "in_progress", "completed", "cancelled"):
            assert RACE_STATUS.valid(status)
        assert not RACE_STATUS.valid("finished")


class TestFlexibleDateTime:
    """Every accepted input becomes a timezone-aware UTC datetime."""

    def test_naive_datetime_is_taken_as_utc(self) -> None:
        value = FLEXIBLE_DATETIME.validate(datetime(2026, 1, 15, 9, 30)).value
        assert value == datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    def test_offset_is_converted_to_utc(self) -> None:
        cet = timezone(timedelta(hours=1))
        value = FLEXIBLE_DATETIME.validate(datetime(2026, 1, 15, 10, 30, tzinfo=cet)).value
        assert value.utcoffset() == timedelta(0)
        assert value.hour == 9

    def test_iso_string_with_z_suffix(self) -> None:
        value = FLEXIBLE_DATETIME.validate("2026-01-15T09:30:00Z").value
        assert value == datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    def test_free_form_string(self) -> None:
        value = FLEXIBLE_DATETIME.validate("15 Jan 2026 09:30").value
        assert value == datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    def test_date_becomes_midnight(self) -> None:
        value = FLEXIBLE_DATETIME.validate(date(2026, 1, 15)).value
        assert value == datetime(2026, 1, 15, tzinfo=timezone.utc)

    def test_epoch_seconds(self) -> None:
        assert FLEXIBLE_DATETIME.validate(0).value == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_garbage_is_unparsable(self) -> None:
        assert FLEXIBLE_DATETIME.validate("not a date").error is ErrorKind.UNPARSABLE_DATETIME
        assert FLEXIBLE_DATETIME.validate("").error is ErrorKind.UNPARSABLE_DATETIME


def test_flexible_date_truncates_datetimes() -> None:
    """A datetime input is reduced to its UTC calendar date."""
    assert FLEXIBLE_DATE.validate("2026-01-15T23:30:00-02:00").value == date(2026, 1, 16)


def test_email_format() -> None:
    """Only well-formed addresses pass."""
    assert EMAIL.valid("referee@ismf-ski.org")
    result = EMAIL.validate("not-an-email")
    assert result.error is ErrorKind.INVALID_FORMAT
    assert result.message == "must be a valid email address"
    assert EMAIL.validate(123).error is ErrorKind.INVALID_TYPE


def test_uuid_format_keeps_case() -> None:
    """UUIDs are matched case-insensitively and returned unchanged."""
    raw = "A1B2C3D4-E5F6-4789-ABCD-EF0123456789"
    assert UUID.validate(raw).value == raw
    assert UUID.validate("1234").message == "must be a valid UUID"


def test_country_code() -> None:
    """Country codes must be 3 upper-case letters from the ISMF member list."""
    assert COUNTRY_CODE.valid("CHE")
    assert COUNTRY_CODE.validate("che").error is ErrorKind.INVALID_FORMAT
    assert COUNTRY_CODE.validate("XYZ").error is ErrorKind.NOT_IN_ENUM


def test_strict_string_rejects_empty() -> None:
    """Empty strings are not filled."""
    assert STRICT_STRING.validate("").message == "must be filled"
    assert STRICT_STRING.valid(" ")


def test_http_url() -> None:
    """Only absolute http(s) URLs with a host are accepted."""
    assert is_http_url("https://www.ismf-ski.org")
    assert is_http_url("http://example.com/path")
    assert not is_http_url("ftp://example.com")
    assert not is_http_url("www.example.com")
    assert not is_http_url(None)


def test_call_raises_value_error() -> None:
    """Calling a semantic type returns the value or raises ValueError."""
    assert BIB_NUMBER("12") == 12
    with pytest.raises(ValueError, match="between 1 and 9999"):
        BIB_NUMBER(0)


class TestAnnotatedTypes:
    """The pydantic form of a semantic type applies the same rule."""

    class Entry(BaseModel):
        bib: BibNumber
        seen_at: OptionalDateTime = None

    def test_coerces_through_pydantic(self) -> None:
        entry = self.Entry(bib="0042", seen_at="2026-01-15T09:30:00")
        assert entry.bib == 42
        assert entry.seen_at.tzinfo is not None

    def test_optional_allows_none(self) -> None:
        assert self.Entry(bib=1).seen_at is None

    def test_rejection_carries_the_rule_message(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            self.Entry(bib=10000)
        assert "must be between 1 and 9999" in str(excinfo.value)
