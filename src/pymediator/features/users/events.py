"""User domain events and their notification handlers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pymediator.dispatch.decorators import notification_handler
from pymediator.domain.messages import Notification

if TYPE_CHECKING:
    from pymediator.features.users.feature import UsersFeature

logger = logging.getLogger(__name__)


class UserCreatedEvent(Notification):
    message_key = "User.Created"

    user_id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None


class UserUpdatedEvent(Notification):
    message_key = "User.Updated"

    user_id: int
    fields_changed: list[str]


class UserDeletedEvent(Notification):
    message_key = "User.Deleted"

    user_id: int
    email: str


@notification_handler(UserCreatedEvent)
class UserCreatedAuditHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, event: UserCreatedEvent) -> None:
        self._feature.audit_log.append(f"created:{event.user_id}")


@notification_handler(UserCreatedEvent)
class SendWelcomeMessageHandler:
    """Queue a welcome message for the new user."""

    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, event: UserCreatedEvent) -> None:
        name = event.first_name or event.email
        self._feature.outbox.append((event.email, f"Welcome, {name}!"))
        logger.debug("Queued welcome message for user %s", event.user_id)


@notification_handler(UserUpdatedEvent)
class UserUpdatedAuditHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, event: UserUpdatedEvent) -> None:
        fields = ",".join(event.fields_changed)
        self._feature.audit_log.append(f"updated:{event.user_id}:{fields}")


@notification_handler(UserDeletedEvent)
class UserDeletedAuditHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, event: UserDeletedEvent) -> None:
        self._feature.audit_log.append(f"deleted:{event.user_id}")
