"""Tests for handler/validator tagging decorators."""

from __future__ import annotations

import pytest

from pymediator.dispatch.decorators import (
    Registration,
    notification_handler,
    registration_for,
    request_handler,
    validator_for,
)
from pymediator.domain.messages import Notification, Request
from pymediator.domain.types import MessageKind


class Ping(Request[str]):
    pass


class Pinged(Notification):
    message_key = "Ping.Done"


class TestDecorators:
    def test_request_handler_tag(self) -> None:
        @request_handler(Ping)
        class Handler:
            pass

        registration = registration_for(Handler)
        assert registration == Registration(kind=MessageKind.REQUEST, message_type=Ping)
        assert registration_for(Handler()) == registration

    def test_notification_identity_uses_message_key(self) -> None:
        @notification_handler(Pinged)
        class Handler:
            pass

        registration = registration_for(Handler)
        assert registration is not None
        assert registration.kind is MessageKind.NOTIFICATION
        assert registration.identity == "Ping.Done"

    def test_validator_tag(self) -> None:
        @validator_for(Ping)
        class PingValidator:
            pass

        registration = registration_for(PingValidator)
        assert registration is not None
        assert registration.kind is MessageKind.VALIDATOR

    def test_untagged(self) -> None:
        assert registration_for(object()) is None

    def test_requires_a_class(self) -> None:
        with pytest.raises(TypeError, match="message class"):
            request_handler("Ping")  # type: ignore[arg-type]

    def test_decorator_returns_same_class(self) -> None:
        class Handler:
            pass

        assert request_handler(Ping)(Handler) is Handler
