"""Request and Notification value objects plus type identity.

Every message is a frozen pydantic model. Routing uses the message's
*type identity*: the ``message_key`` declared on the class itself, if any,
otherwise the class ``__name__``.

Usage::

    class GetUserByIdQuery(Request[UserDto]):
        user_id: int

    class UserCreatedEvent(Notification):
        message_key = "User.Created"
        user_id: int
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field

TResponse = TypeVar("TResponse")


class Message(BaseModel):
    """Common base: immutable, identified by :func:`type_identity`."""

    model_config = {"frozen": True}

    message_key: ClassVar[str | None] = None


class Request(Message, Generic[TResponse]):
    """A command or query dispatched to exactly one handler via ``send``.

    The type parameter declares the response type the handler produces.
    """


class Notification(Message):
    """A domain event broadcast to zero or more handlers via ``publish``."""

    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: int = 1


def type_identity(message: Any) -> str:
    """Return the routing key for a message instance or class.

    A ``message_key`` declared on the class itself wins; a key inherited from
    a parent is ignored, so subclasses route under their own name. Plain
    strings are returned unchanged so callers can pass an identity they
    already hold.
    """
    if isinstance(message, str):
        return message
    cls = message if isinstance(message, type) else type(message)
    # ``Keyed[int]`` is a generated subclass; its key lives on the origin.
    origin = getattr(cls, "__pydantic_generic_metadata__", {}).get("origin")
    if origin is not None:
        cls = origin
    key = cls.__dict__.get("message_key")
    if isinstance(key, str) and key:
        return key
    return cls.__name__.split("[", 1)[0]
