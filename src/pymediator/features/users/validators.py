"""Validators for every user request."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymediator.dispatch.decorators import validator_for
from pymediator.features.users.commands import (
    CreateUserCommand,
    DeleteUserCommand,
    UpdateUserCommand,
)
from pymediator.features.users.queries import GetAllUsersQuery, GetUserByIdQuery
from pymediator.validation.validator import AbstractValidator

if TYPE_CHECKING:
    from pymediator.features.users.repository import InMemoryUserRepository

PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)"


@validator_for(CreateUserCommand)
class CreateUserCommandValidator(AbstractValidator[CreateUserCommand]):
    def __init__(self, repository: InMemoryUserRepository) -> None:
        super().__init__()

        (
            self.rule_for("email")
            .must_be_defined()
            .with_message("Email is required")
            .not_empty()
            .with_message("Email cannot be empty")
            .email()
            .with_message("Email must be valid")
            .must_be_unique(repository.email_available, "users")
        )
        (
            self.rule_for("password")
            .must_be_defined()
            .with_message("Password is required")
            .min_length(8)
            .matches(PASSWORD_PATTERN)
            .with_message("Password must contain upper case, lower case and a digit")
        )
        self.rule_for("first_name").max_length(50)
        self.rule_for("last_name").max_length(50)


@validator_for(UpdateUserCommand)
class UpdateUserCommandValidator(AbstractValidator[UpdateUserCommand]):
    def __init__(self, repository: InMemoryUserRepository) -> None:
        super().__init__()

        (
            self.rule_for("user_id")
            .must_be_defined()
            .greater_than_or_equal_to(1)
            .must_exist_in(repository.exists, "users")
        )
        self.rule_for("email").email()
        self.rule_for("first_name").max_length(50)
        self.rule_for("last_name").max_length(50)


@validator_for(DeleteUserCommand)
class DeleteUserCommandValidator(AbstractValidator[DeleteUserCommand]):
    def __init__(self) -> None:
        super().__init__()
        self.rule_for("user_id").must_be_defined().greater_than_or_equal_to(1)


@validator_for(GetUserByIdQuery)
class GetUserByIdQueryValidator(AbstractValidator[GetUserByIdQuery]):
    def __init__(self) -> None:
        super().__init__()
        (
            self.rule_for(lambda q: q.user_id)
            .must_be_defined()
            .must_be(lambda user_id: user_id > 0)
            .with_message("ID must be greater than 0")
        )


@validator_for(GetAllUsersQuery)
class GetAllUsersQueryValidator(AbstractValidator[GetAllUsersQuery]):
    def __init__(self) -> None:
        super().__init__()
        self.rule_for("page").greater_than_or_equal_to(1)
        self.rule_for("limit").range(1, 100)
