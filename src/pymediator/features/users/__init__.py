"""User feature — create/update/delete commands, queries, events, validators."""

from pymediator.features.users.commands import (
    CreateUserCommand,
    DeleteUserCommand,
    UpdateUserCommand,
)
from pymediator.features.users.events import UserCreatedEvent, UserDeletedEvent, UserUpdatedEvent
from pymediator.features.users.feature import UsersFeature
from pymediator.features.users.models import UserDto, UserNotFoundError, UserPage
from pymediator.features.users.queries import GetAllUsersQuery, GetUserByIdQuery

__all__ = [
    "CreateUserCommand",
    "DeleteUserCommand",
    "GetAllUsersQuery",
    "GetUserByIdQuery",
    "UpdateUserCommand",
    "UserCreatedEvent",
    "UserDeletedEvent",
    "UserDto",
    "UserNotFoundError",
    "UserPage",
    "UserUpdatedEvent",
    "UsersFeature",
]
