"""Dispatch engine — registry, pipeline behaviors, and the mediator."""

from pymediator.dispatch.behaviors import (
    LoggingBehavior,
    TelemetryBehavior,
    ValidationBehavior,
    default_behaviors,
)
from pymediator.dispatch.contracts import PipelineBehavior
from pymediator.dispatch.decorators import notification_handler, request_handler, validator_for
from pymediator.dispatch.mediator import Mediator
from pymediator.dispatch.pipeline import PipelineBuilder
from pymediator.dispatch.registry import HandlerRegistry

__all__ = [
    "HandlerRegistry",
    "LoggingBehavior",
    "Mediator",
    "PipelineBehavior",
    "PipelineBuilder",
    "TelemetryBehavior",
    "ValidationBehavior",
    "default_behaviors",
    "notification_handler",
    "request_handler",
    "validator_for",
]
