"""Tests for the error taxonomy."""

from __future__ import annotations

from pymediator.errors import (
    DuplicateHandlerError,
    HandlerNotFoundError,
    MediatorError,
    RegistrySealedError,
    ValidationFailedError,
)


class TestErrors:
    def test_all_derive_from_mediator_error(self) -> None:
        for exc in (
            DuplicateHandlerError("X"),
            RegistrySealedError("X"),
            HandlerNotFoundError("X"),
            ValidationFailedError([]),
        ):
            assert isinstance(exc, MediatorError)

    def test_messages(self) -> None:
        assert str(DuplicateHandlerError("X")) == "Duplicate request handler for X"
        assert str(RegistrySealedError("X")) == "Registry is sealed; cannot register X"
        assert str(ValidationFailedError([])) == "Validation failed"
