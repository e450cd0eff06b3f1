"""Command: send a request through the pipeline to its handler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click
from pydantic_core import to_jsonable_python

from pymediator.commands._base import MediatorCommand
from pymediator.commands._context import parse_payload
from pymediator.domain.messages import Request
from pymediator.errors import HandlerNotFoundError
from pymediator.results import DispatchResult

if TYPE_CHECKING:
    from pymediator.commands._context import AppContext

logger = logging.getLogger(__name__)


async def _send(app: AppContext, identity: str, request: Request) -> DispatchResult:
    try:
        response = await app.mediator.send(request)
    except Exception as exc:
        logger.debug("send %s failed", identity, exc_info=True)
        return DispatchResult.from_exception("send", identity, exc, meta=app.telemetry_meta())
    return DispatchResult.success(
        "send",
        identity,
        {"response": to_jsonable_python(response)},
        meta=app.telemetry_meta(),
    )


@click.command(
    cls=MediatorCommand,
    examples="""\
  pymediator send CreateUserCommand --data '{"email": "ada@example.com", "password": "Passw0rd!"}'
  pymediator send GetUserByIdQuery --data '{"user_id": 1}'
  pymediator --json send GetAllUsersQuery --data '{"page": 1, "limit": 20}'""",
)
@click.argument("message_type")
@click.option("-d", "--data", default="{}", help="Request fields as a JSON object.")
@click.pass_obj
def send(app: AppContext, message_type: str, data: str) -> None:
    """Send a request to its handler and print the response."""
    payload = parse_payload(data)
    try:
        request = app.load_message(message_type, payload, Request)
    except HandlerNotFoundError as exc:
        app.emit(DispatchResult.from_exception("send", message_type, exc))
        return
    app.emit(app.run(_send, app, message_type, request))
