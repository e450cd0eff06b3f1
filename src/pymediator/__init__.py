"""pymediator — in-process request dispatch with pipeline behaviors and fluent validation."""

from pymediator.dispatch import (
    HandlerRegistry,
    Mediator,
    PipelineBehavior,
    notification_handler,
    request_handler,
    validator_for,
)
from pymediator.domain.messages import Notification, Request, type_identity
from pymediator.errors import (
    DuplicateHandlerError,
    HandlerNotFoundError,
    MediatorError,
    RegistrySealedError,
    ValidationFailedError,
)
from pymediator.validation import AbstractValidator, ValidationFailure, ValidationResult

__version__ = "0.3.0"

__all__ = [
    "AbstractValidator",
    "DuplicateHandlerError",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "Mediator",
    "MediatorError",
    "Notification",
    "PipelineBehavior",
    "RegistrySealedError",
    "Request",
    "ValidationFailedError",
    "ValidationFailure",
    "ValidationResult",
    "__version__",
    "notification_handler",
    "request_handler",
    "type_identity",
    "validator_for",
]
