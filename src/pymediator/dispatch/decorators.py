"""Class decorators tagging handlers and validators with their target message.

Usage::

    @request_handler(GetUserByIdQuery)
    class GetUserByIdQueryHandler:
        async def handle_async(self, query: GetUserByIdQuery) -> UserDto: ...

The registry reads the tag with :func:`registration_for` while scanning.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pymediator.domain.messages import type_identity
from pymediator.domain.types import MessageKind

_C = TypeVar("_C", bound=type)

REGISTRATION_ATTR = "__pymediator_registration__"


@dataclass(frozen=True)
class Registration:
    """Target of a tagged handler or validator class."""

    kind: MessageKind
    message_type: type

    @property
    def identity(self) -> str:
        return type_identity(self.message_type)


def _tag(kind: MessageKind, message_type: type) -> Callable[[_C], _C]:
    if not isinstance(message_type, type):
        msg = f"Expected a message class, got {message_type!r}"
        raise TypeError(msg)

    def decorate(cls: _C) -> _C:
        setattr(cls, REGISTRATION_ATTR, Registration(kind=kind, message_type=message_type))
        return cls

    return decorate


def request_handler(request_type: type) -> Callable[[_C], _C]:
    """Mark a class as the handler for *request_type*."""
    return _tag(MessageKind.REQUEST, request_type)


def notification_handler(notification_type: type) -> Callable[[_C], _C]:
    """Mark a class as one of the handlers for *notification_type*."""
    return _tag(MessageKind.NOTIFICATION, notification_type)


def validator_for(request_type: type) -> Callable[[_C], _C]:
    """Mark a class as the validator for *request_type*."""
    return _tag(MessageKind.VALIDATOR, request_type)


def registration_for(obj: Any) -> Registration | None:
    """Return the tag carried by a class or instance, if any."""
    cls = obj if isinstance(obj, type) else type(obj)
    registration = getattr(cls, REGISTRATION_ATTR, None)
    return registration if isinstance(registration, Registration) else None
