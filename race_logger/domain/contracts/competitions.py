from __future__ import annotations

from datetime import date

from race_logger.domain.contracts.base import Contract, RuleContext, required, rule
from race_logger.domain.types import COUNTRY_CODE, FlexibleDate, is_http_url


class UpdateCompetition(Contract):
    """Full competition attributes; used for both create and update."""

    params = {
        "name": required(str),
        "city": required(str),
        "place": required(str),
        "country": required(str),
        "description": required(str),
        "start_date": required(FlexibleDate),
        "end_date": required(FlexibleDate),
        "webpage_url": required(str),
    }

    @rule("country")
    def country_code(self, ctx: RuleContext) -> None:
        if not COUNTRY_CODE.valid(ctx.values["country"]):
            ctx.failure("country", "must be a valid ISO 3166-1 alpha-3 country code")

    @rule("end_date", "start_date")
    def dates_in_order(self, ctx: RuleContext) -> None:
        start_date: date = ctx.values["start_date"]
        end_date: date = ctx.values["end_date"]
        if end_date < start_date:
            ctx.failure("end_date", "must be after start date")

    @rule("webpage_url")
    def webpage_url_format(self, ctx: RuleContext) -> None:
        if not is_http_url(ctx.values["webpage_url"]):
            ctx.failure("webpage_url", "must be a valid HTTP or HTTPS URL")
