"""Command: run a request's validator without dispatching it."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pymediator.commands._base import MediatorCommand
from pymediator.commands._context import parse_payload
from pymediator.domain.messages import Message
from pymediator.errors import HandlerNotFoundError, ValidationFailedError
from pymediator.results import DispatchResult

if TYPE_CHECKING:
    from pymediator.commands._context import AppContext


async def _validate(app: AppContext, identity: str, message: Message) -> DispatchResult:
    validator = app.registry.resolve_validator(identity)
    if validator is None:
        return DispatchResult.success("validate", identity, {"valid": True, "validator": None})
    result = await validator.validate_async(message)
    if not result.is_valid:
        return DispatchResult.from_exception(
            "validate", identity, ValidationFailedError(result.errors)
        )
    return DispatchResult.success(
        "validate",
        identity,
        {"valid": True, "validator": type(validator).__name__},
    )


@click.command(
    cls=MediatorCommand,
    examples="""\
  pymediator validate CreateUserCommand --data '{"email": "invalid-email"}'
  pymediator --json validate GetAllUsersQuery --data '{"limit": 500}'""",
)
@click.argument("message_type")
@click.option("-d", "--data", default="{}", help="Message fields as a JSON object.")
@click.pass_obj
def validate(app: AppContext, message_type: str, data: str) -> None:
    """Validate a message payload and list every failure."""
    payload = parse_payload(data)
    try:
        message = app.load_message(message_type, payload, Message)
    except HandlerNotFoundError as exc:
        app.emit(DispatchResult.from_exception("validate", message_type, exc))
        return
    app.emit(app.run(_validate, app, message_type, message))
