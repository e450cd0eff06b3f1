"""Command: publish a notification to every subscribed handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pymediator.commands._base import MediatorCommand
from pymediator.commands._context import parse_payload
from pymediator.dispatch.telemetry import open_span
from pymediator.domain.messages import Notification
from pymediator.errors import HandlerNotFoundError
from pymediator.results import DispatchResult

if TYPE_CHECKING:
    from pymediator.commands._context import AppContext


async def _publish(app: AppContext, identity: str, notification: Notification) -> DispatchResult:
    count = len(app.mediator.registry.resolve_all(identity))
    with open_span(f"publish:{identity}") as span:
        await app.mediator.publish(notification)
        if span is not None:
            span.annotate("handlers", count)
            span.set_ok()
            app.last_span = span
    return DispatchResult.success(
        "publish",
        identity,
        {"handlers": count},
        meta=app.telemetry_meta(),
    )


@click.command(
    cls=MediatorCommand,
    examples="""\
  pymediator publish User.Created --data '{"user_id": 1, "email": "ada@example.com"}'
  pymediator -v publish User.Deleted --data '{"user_id": 1, "email": "ada@example.com"}'""",
)
@click.argument("message_type")
@click.option("-d", "--data", default="{}", help="Notification fields as a JSON object.")
@click.pass_obj
def publish(app: AppContext, message_type: str, data: str) -> None:
    """Publish a notification; handler failures are logged, never fatal."""
    payload = parse_payload(data)
    try:
        notification = app.load_message(message_type, payload, Notification)
    except HandlerNotFoundError as exc:
        app.emit(DispatchResult.from_exception("publish", message_type, exc))
        return
    app.emit(app.run(_publish, app, message_type, notification))
