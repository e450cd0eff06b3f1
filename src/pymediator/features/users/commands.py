"""User commands (state changes) and their handlers.

Each successful command publishes the matching domain event through the
feature's bound mediator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymediator.dispatch.decorators import request_handler
from pymediator.domain.messages import Request
from pymediator.features.users.events import UserCreatedEvent, UserDeletedEvent, UserUpdatedEvent
from pymediator.features.users.models import UserDto, UserNotFoundError

if TYPE_CHECKING:
    from pymediator.features.users.feature import UsersFeature


class CreateUserCommand(Request[int]):
    """Create a user; responds with the new id."""

    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UpdateUserCommand(Request[UserDto]):
    user_id: int | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class DeleteUserCommand(Request[None]):
    user_id: int | None = None


@request_handler(CreateUserCommand)
class CreateUserCommandHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, command: CreateUserCommand) -> int:
        user = await self._feature.repository.add(
            email=command.email or "",
            password=command.password or "",
            first_name=command.first_name,
            last_name=command.last_name,
        )
        await self._feature.publish(
            UserCreatedEvent(
                user_id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
            )
        )
        return user.id


@request_handler(UpdateUserCommand)
class UpdateUserCommandHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, command: UpdateUserCommand) -> UserDto:
        user_id = command.user_id or 0
        outcome = await self._feature.repository.update(
            user_id,
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
        )
        if outcome is None:
            raise UserNotFoundError(user_id)
        user, changed = outcome
        if changed:
            await self._feature.publish(UserUpdatedEvent(user_id=user.id, fields_changed=changed))
        return user


@request_handler(DeleteUserCommand)
class DeleteUserCommandHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, command: DeleteUserCommand) -> None:
        user_id = command.user_id or 0
        user = await self._feature.repository.delete(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        await self._feature.publish(UserDeletedEvent(user_id=user.id, email=user.email))
