"""HandlerRegistry — type identity to handler(s) and validator.

Two-phase lifecycle:

1. Build phase: handlers and validators are registered at start-up, either
   directly or by scanning decorator-tagged objects.
2. Sealed phase: :meth:`HandlerRegistry.seal` freezes the maps. Reads are
   plain dict lookups and need no locking; any further registration raises
   :class:`~pymediator.errors.RegistrySealedError`.

INVARIANT: at most one handler and one validator per request identity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pymediator.dispatch.decorators import registration_for
from pymediator.domain.messages import type_identity
from pymediator.domain.types import MessageKind
from pymediator.errors import DuplicateHandlerError, RegistrySealedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Point-in-time copy of a registry's build-phase maps."""

    request_handlers: dict[str, Any]
    notification_handlers: dict[str, list[Any]]
    validators: dict[str, Any]
    message_types: dict[str, type]


class HandlerRegistry:
    """Maps request/notification identities to their registered consumers."""

    def __init__(self) -> None:
        self._request_handlers: dict[str, Any] = {}
        self._notification_handlers: dict[str, list[Any]] = {}
        self._validators: dict[str, Any] = {}
        self._message_types: dict[str, type] = {}
        self._sealed = False

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    def register_request_handler(self, target: type | str, handler: Any) -> None:
        identity = self._prepare(target)
        if identity in self._request_handlers:
            raise DuplicateHandlerError(identity)
        self._request_handlers[identity] = handler
        logger.debug("Registered request handler %s for %s", type(handler).__name__, identity)

    def register_notification_handler(self, target: type | str, handler: Any) -> None:
        identity = self._prepare(target)
        self._notification_handlers.setdefault(identity, []).append(handler)
        logger.debug(
            "Registered notification handler %s for %s", type(handler).__name__, identity
        )

    def register_validator(self, target: type | str, validator: Any) -> None:
        identity = self._prepare(target)
        if identity in self._validators:
            raise DuplicateHandlerError(identity, kind="validator")
        self._validators[identity] = validator
        logger.debug("Registered validator %s for %s", type(validator).__name__, identity)

    def register(self, obj: Any) -> None:
        """Register a decorator-tagged handler or validator instance."""
        registration = registration_for(obj)
        if registration is None:
            msg = f"{type(obj).__name__} is not tagged as a handler or validator"
            raise TypeError(msg)
        if registration.kind is MessageKind.REQUEST:
            self.register_request_handler(registration.message_type, obj)
        elif registration.kind is MessageKind.NOTIFICATION:
            self.register_notification_handler(registration.message_type, obj)
        else:
            self.register_validator(registration.message_type, obj)

    def snapshot(self) -> RegistrySnapshot:
        """Capture the current registrations so a failed batch can be undone."""
        return RegistrySnapshot(
            request_handlers=dict(self._request_handlers),
            notification_handlers={k: list(v) for k, v in self._notification_handlers.items()},
            validators=dict(self._validators),
            message_types=dict(self._message_types),
        )

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Roll the maps back to *snapshot*. Only allowed before sealing."""
        if self._sealed:
            raise RegistrySealedError("<restore>")
        self._request_handlers = dict(snapshot.request_handlers)
        self._notification_handlers = {
            k: list(v) for k, v in snapshot.notification_handlers.items()
        }
        self._validators = dict(snapshot.validators)
        self._message_types = dict(snapshot.message_types)

    def scan(self, objects: Iterable[Any]) -> int:
        """Register every tagged object in *objects*; untagged ones are skipped.

        Returns the number of objects registered.
        """
        count = 0
        for obj in objects:
            if registration_for(obj) is None:
                continue
            self.register(obj)
            count += 1
        return count

    def seal(self) -> None:
        """End the build phase. Idempotent."""
        if self._sealed:
            return
        self._sealed = True
        counts = self.summary()
        logger.info(
            "Registry sealed: %d request handler(s), %d notification type(s), %d validator(s)",
            counts["requests"],
            counts["notifications"],
            counts["validators"],
        )

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def resolve(self, identity: str) -> Any | None:
        return self._request_handlers.get(identity)

    def resolve_all(self, identity: str) -> tuple[Any, ...]:
        return tuple(self._notification_handlers.get(identity, ()))

    def resolve_validator(self, identity: str) -> Any | None:
        return self._validators.get(identity)

    def resolve_message_type(self, identity: str) -> type | None:
        """Return the message class registered under *identity*, if known."""
        return self._message_types.get(identity)

    def summary(self) -> dict[str, int]:
        return {
            "requests": len(self._request_handlers),
            "notifications": len(self._notification_handlers),
            "notification_handlers": sum(len(h) for h in self._notification_handlers.values()),
            "validators": len(self._validators),
        }

    def entries(self) -> list[dict[str, Any]]:
        """Flat listing of every registration, for display."""
        rows: list[dict[str, Any]] = []
        for identity, handler in sorted(self._request_handlers.items()):
            validator = self._validators.get(identity)
            rows.append(
                {
                    "kind": MessageKind.REQUEST.value,
                    "identity": identity,
                    "handler": type(handler).__name__,
                    "validator": type(validator).__name__ if validator is not None else None,
                }
            )
        for identity, handlers in sorted(self._notification_handlers.items()):
            for handler in handlers:
                rows.append(
                    {
                        "kind": MessageKind.NOTIFICATION.value,
                        "identity": identity,
                        "handler": type(handler).__name__,
                        "validator": None,
                    }
                )
        return rows

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _prepare(self, target: type | str) -> str:
        identity = type_identity(target)
        if self._sealed:
            raise RegistrySealedError(identity)
        if isinstance(target, type):
            self._message_types.setdefault(identity, target)
        return identity
