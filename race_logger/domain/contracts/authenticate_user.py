from __future__ import annotations

from race_logger.domain.contracts.base import Contract, RuleContext, required, rule
from race_logger.domain.types import EMAIL

MIN_PASSWORD_LENGTH = 8


class AuthenticateUser(Contract):
    """Login input: a well-formed email and a password of at least 8 characters."""

    params = {
        "email": required(str),
        "password": required(str),
    }

    @rule("email")
    def email_format(self, ctx: RuleContext) -> None:
        if not EMAIL.valid(ctx.values["email"]):
            ctx.failure("email", "must be a valid email address")

    @rule("password")
    def password_length(self, ctx: RuleContext) -> None:
        if len(ctx.values["password"]) < MIN_PASSWORD_LENGTH:
            ctx.failure("password", f"must be at least {MIN_PASSWORD_LENGTH} characters")
