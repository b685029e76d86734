"""User read and sign-in use cases."""

from __future__ import annotations

from race_logger.db.repos import UserRepo
from race_logger.domain.contracts import AuthenticateUser
from race_logger.operations.result import Failure, OperationResult, Success


class Authenticate:
    def __init__(self, user_repo: UserRepo):
        self.user_repo = user_repo
        self.contract = AuthenticateUser()

    def __call__(self, email: str, password: str) -> OperationResult:
        validation = self.contract.call({"email": email, "password": password})
        if validation.failure:
            return Failure.from_validation(validation)

        values = validation.to_dict()
        user = self.user_repo.authenticate(values["email"], values["password"])
        if user is None:
            return Failure("invalid_credentials", "Invalid email or password")
        return Success(user)


class FindUser:
    def __init__(self, user_repo: UserRepo):
        self.user_repo = user_repo

    def __call__(self, id: int) -> OperationResult:
        user = self.user_repo.find(id)
        return Success(user) if user is not None else Failure("not_found", "User not found")

    def by_email(self, email: str) -> OperationResult:
        user = self.user_repo.find_by_email(email)
        return Success(user) if user is not None else Failure("not_found", "User not found")


class ListUsers:
    def __init__(self, user_repo: UserRepo):
        self.user_repo = user_repo

    def __call__(self) -> OperationResult:
        return Success(self.user_repo.all())

    def admins(self) -> OperationResult:
        return Success(self.user_repo.admins())

    def referees(self) -> OperationResult:
        return Success(self.user_repo.referees())

    def with_role(self, role_name: str) -> OperationResult:
        return Success(self.user_repo.with_role(role_name))

    def search(self, query: str) -> OperationResult:
        return Success(self.user_repo.search(query))
