"""UsersFeature — wires the user repository, handlers and validators together.

Handlers are created before the mediator exists, so command handlers
publish their events through :meth:`UsersFeature.publish`, which forwards
to whichever mediator :meth:`UsersFeature.bind` attached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pymediator.features.users.commands import (
    CreateUserCommandHandler,
    DeleteUserCommandHandler,
    UpdateUserCommandHandler,
)
from pymediator.features.users.events import (
    SendWelcomeMessageHandler,
    UserCreatedAuditHandler,
    UserDeletedAuditHandler,
    UserUpdatedAuditHandler,
)
from pymediator.features.users.queries import GetAllUsersQueryHandler, GetUserByIdQueryHandler
from pymediator.features.users.repository import InMemoryUserRepository
from pymediator.features.users.validators import (
    CreateUserCommandValidator,
    DeleteUserCommandValidator,
    GetAllUsersQueryValidator,
    GetUserByIdQueryValidator,
    UpdateUserCommandValidator,
)

if TYPE_CHECKING:
    from pymediator.dispatch.mediator import Mediator
    from pymediator.domain.messages import Notification

logger = logging.getLogger(__name__)


class UsersFeature:
    """Owns the user store plus the side-effect sinks the event handlers write to.

    Attributes:
        repository: User storage shared by handlers and validators.
        audit_log: ``"<action>:<user_id>"`` entries appended by audit handlers.
        outbox: ``(email, text)`` welcome messages queued on user creation.
    """

    def __init__(self, repository: InMemoryUserRepository | None = None) -> None:
        self.repository = repository or InMemoryUserRepository()
        self.audit_log: list[str] = []
        self.outbox: list[tuple[str, str]] = []
        self._mediator: Mediator | None = None

    def bind(self, mediator: Mediator) -> None:
        """Attach the mediator used to publish domain events."""
        self._mediator = mediator

    async def publish(self, event: Notification) -> None:
        if self._mediator is None:
            logger.debug("UsersFeature not bound; dropping %s", type(event).__name__)
            return
        await self._mediator.publish(event)

    def components(self) -> list[object]:
        """Every handler and validator instance, ready for ``HandlerRegistry.scan``."""
        return [
            CreateUserCommandHandler(self),
            UpdateUserCommandHandler(self),
            DeleteUserCommandHandler(self),
            GetUserByIdQueryHandler(self),
            GetAllUsersQueryHandler(self),
            UserCreatedAuditHandler(self),
            SendWelcomeMessageHandler(self),
            UserUpdatedAuditHandler(self),
            UserDeletedAuditHandler(self),
            CreateUserCommandValidator(self.repository),
            UpdateUserCommandValidator(self.repository),
            DeleteUserCommandValidator(),
            GetUserByIdQueryValidator(),
            GetAllUsersQueryValidator(),
        ]
