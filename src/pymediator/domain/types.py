"""Message classification enums."""

from __future__ import annotations

from enum import StrEnum


class MessageKind(StrEnum):
    """What a registration entry targets."""

    REQUEST = "request"
    NOTIFICATION = "notification"
    VALIDATOR = "validator"


class PublishStrategy(StrEnum):
    """How ``Mediator.publish`` drives notification handlers."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"
