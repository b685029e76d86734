from __future__ import annotations

from race_logger.domain.contracts.base import Contract, RuleContext, optional, required, rule
from race_logger.domain.types import BIB_NUMBER_MAX, BIB_NUMBER_MIN, UUID, is_http_url

MAX_DESCRIPTION_LENGTH = 10_000
MAX_ATHLETE_NAME_LENGTH = 255


class ReportContract(Contract):
    """Field report submitted from a referee device.

    ``client_uuid`` is generated on the device so a report resubmitted after a
    network hiccup can be recognised.
    """

    params = {
        "client_uuid": required(str),
        "race_id": required(int),
        "user_id": required(int),
        "bib_number": required(int),
        "description": required(str),
        "race_location_id": optional(int),
        "athlete_name": optional(str),
        "incident_id": optional(int),
        "video_url": optional(str),
    }

    @rule("client_uuid")
    def uuid_format(self, ctx: RuleContext) -> None:
        if not UUID.valid(ctx.values["client_uuid"]):
            ctx.failure("client_uuid", "must be a valid UUID")

    @rule("race_id")
    def race_exists(self, ctx: RuleContext) -> None:
        ctx.require_existing("race_id", "race", "race not found")

    @rule("bib_number")
    def bib_range(self, ctx: RuleContext) -> None:
        if not BIB_NUMBER_MIN <= ctx.values["bib_number"] <= BIB_NUMBER_MAX:
            ctx.failure("bib_number", f"must be between {BIB_NUMBER_MIN} and {BIB_NUMBER_MAX}")

    @rule("description")
    def description_present(self, ctx: RuleContext) -> None:
        description = ctx.values["description"]
        if not description.strip():
            ctx.failure("description", "cannot be blank")
        elif len(description) > MAX_DESCRIPTION_LENGTH:
            ctx.failure("description", "is too long (maximum 10,000 characters)")

    @rule("athlete_name")
    def athlete_name_length(self, ctx: RuleContext) -> None:
        name = ctx.values.get("athlete_name")
        if name and len(name) > MAX_ATHLETE_NAME_LENGTH:
            ctx.failure("athlete_name", "is too long (maximum 255 characters)")

    @rule("video_url")
    def video_url_format(self, ctx: RuleContext) -> None:
        url = ctx.values.get("video_url")
        if url and not is_http_url(url):
            ctx.failure("video_url", "must be a valid HTTP/HTTPS URL")
