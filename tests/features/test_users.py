"""End-to-end tests for the users feature through the mediator."""

from __future__ import annotations

import anyio
import pytest

from pymediator.dispatch.mediator import Mediator
from pymediator.dispatch.registry import HandlerRegistry
from pymediator.errors import ValidationFailedError
from pymediator.features.users import (
    CreateUserCommand,
    DeleteUserCommand,
    GetAllUsersQuery,
    GetUserByIdQuery,
    UpdateUserCommand,
    UserDto,
    UserNotFoundError,
    UserPage,
    UsersFeature,
)

VALID_PASSWORD = "Sup3rSecret"


@pytest.fixture
def mediator(registry: HandlerRegistry, users: UsersFeature) -> Mediator:
    registry.scan(users.components())
    mediator = Mediator(registry)
    users.bind(mediator)
    return mediator


def _create(mediator: Mediator, email: str, **fields: str) -> int:
    command = CreateUserCommand(email=email, password=VALID_PASSWORD, **fields)
    return anyio.run(mediator.send, command)


class TestCreateUser:
    def test_returns_new_id_and_publishes(self, mediator: Mediator, users: UsersFeature) -> None:
        user_id = _create(mediator, "Ada@Example.com", first_name="Ada")
        assert user_id == 1
        assert users.audit_log == ["created:1"]
        assert users.outbox == [("ada@example.com", "Welcome, Ada!")]

    def test_invalid_command_lists_every_failure(self, mediator: Mediator) -> None:
        command = CreateUserCommand(email="invalid-email", password="short")
        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(mediator.send, command)
        messages = [f.message for f in exc_info.value.failures]
        assert messages == [
            "Email must be valid",
            "'password' must be at least 8 characters long.",
            "Password must contain upper case, lower case and a digit",
        ]

    def test_missing_fields_use_custom_messages(self, mediator: Mediator) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(mediator.send, CreateUserCommand())
        messages = [f.message for f in exc_info.value.failures]
        assert "Email is required" in messages
        assert "Email cannot be empty" in messages
        assert "Password is required" in messages

    def test_email_must_be_unique(self, mediator: Mediator, users: UsersFeature) -> None:
        _create(mediator, "ada@example.com")
        with pytest.raises(ValidationFailedError) as exc_info:
            _create(mediator, "ADA@example.com")
        assert [f.message for f in exc_info.value.failures] == ["'email' must be unique in users."]
        assert len(users.repository) == 1


class TestQueries:
    def test_get_by_id(self, mediator: Mediator) -> None:
        user_id = _create(mediator, "ada@example.com", first_name="Ada", last_name="Lovelace")
        user = anyio.run(mediator.send, GetUserByIdQuery(user_id=user_id))
        assert isinstance(user, UserDto)
        assert user.email == "ada@example.com"
        assert user.last_name == "Lovelace"

    def test_get_by_id_validation(self, mediator: Mediator) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(mediator.send, GetUserByIdQuery(user_id=0))
        assert exc_info.value.failures[0].message == "ID must be greater than 0"
        assert exc_info.value.failures[0].property_name == "user_id"

    def test_get_missing_user_raises_handler_error(self, mediator: Mediator) -> None:
        with pytest.raises(UserNotFoundError):
            anyio.run(mediator.send, GetUserByIdQuery(user_id=42))

    def test_paging(self, mediator: Mediator) -> None:
        for n in range(3):
            _create(mediator, f"user{n}@example.com")
        page = anyio.run(mediator.send, GetAllUsersQuery(page=1, limit=2))
        assert isinstance(page, UserPage)
        assert [u.id for u in page.items] == [1, 2]
        assert page.total == 3
        assert page.has_next
        last = anyio.run(mediator.send, GetAllUsersQuery(page=2, limit=2))
        assert [u.id for u in last.items] == [3]
        assert not last.has_next

    def test_limit_out_of_range(self, mediator: Mediator) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(mediator.send, GetAllUsersQuery(limit=500))
        assert exc_info.value.failures[0].message == "'limit' must be between 1 and 100."


class TestUpdateAndDelete:
    def test_update_publishes_changed_fields(self, mediator: Mediator, users: UsersFeature) -> None:
        user_id = _create(mediator, "ada@example.com", first_name="Ada")
        user = anyio.run(
            mediator.send, UpdateUserCommand(user_id=user_id, first_name="Augusta")
        )
        assert user.first_name == "Augusta"
        assert users.audit_log[-1] == "updated:1:first_name"

    def test_noop_update_publishes_nothing(self, mediator: Mediator, users: UsersFeature) -> None:
        user_id = _create(mediator, "ada@example.com", first_name="Ada")
        anyio.run(mediator.send, UpdateUserCommand(user_id=user_id, first_name="Ada"))
        assert users.audit_log == ["created:1"]

    def test_update_unknown_user_fails_validation(self, mediator: Mediator) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(mediator.send, UpdateUserCommand(user_id=9, first_name="X"))
        assert exc_info.value.failures[0].message == "'user_id' must exist in users."

    def test_delete(self, mediator: Mediator, users: UsersFeature) -> None:
        user_id = _create(mediator, "ada@example.com")
        assert anyio.run(mediator.send, DeleteUserCommand(user_id=user_id)) is None
        assert users.audit_log[-1] == "deleted:1"
        with pytest.raises(UserNotFoundError):
            anyio.run(mediator.send, DeleteUserCommand(user_id=user_id))


class TestUnboundFeature:
    def test_publish_without_mediator_is_dropped(self, users: UsersFeature) -> None:
        from pymediator.features.users import UserDeletedEvent

        anyio.run(users.publish, UserDeletedEvent(user_id=1, email="a@example.com"))
        assert users.audit_log == []
