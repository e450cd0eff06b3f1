"""ValidationFailure and ValidationResult — the validator output contract."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pymediator.errors import ValidationFailedError


class ValidationFailure(BaseModel):
    """A single failed predicate. Compared structurally for de-duplication."""

    model_config = {"frozen": True}

    property_name: str
    message: str
    attempted_value: Any = None

    def __str__(self) -> str:
        return self.message


class ValidationResult(BaseModel):
    """Aggregate outcome of one ``validate_async`` call.

    Attributes:
        errors: Failures in first-seen order, already de-duplicated when
            produced by a validator.
    """

    errors: list[ValidationFailure] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def add(self, property_name: str, message: str, attempted_value: Any = None) -> None:
        self.errors.append(
            ValidationFailure(
                property_name=property_name,
                message=message,
                attempted_value=attempted_value,
            )
        )

    def throw_if_invalid(self) -> None:
        """Raise :class:`ValidationFailedError` carrying every failure."""
        if not self.is_valid:
            raise ValidationFailedError(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [error.model_dump() for error in self.errors],
        }

    def __str__(self) -> str:
        return "\n".join(str(error) for error in self.errors)


def dedupe_failures(failures: list[ValidationFailure]) -> list[ValidationFailure]:
    """Drop structural duplicates, keeping the first occurrence of each.

    Attempted values may be unhashable (lists, dicts), so membership is
    checked by equality rather than through a set. Values are compared
    together with their types: ``1`` and ``True`` are distinct attempts.
    """
    unique: list[ValidationFailure] = []
    seen: list[tuple[str, str, Any]] = []
    for failure in failures:
        key = (failure.property_name, failure.message, _typed(failure.attempted_value))
        if key not in seen:
            seen.append(key)
            unique.append(failure)
    return unique


def _typed(value: Any) -> Any:
    """Pair *value* (and any nested container items) with its exact type."""
    if isinstance(value, (list, tuple)):
        return (type(value), tuple(_typed(item) for item in value))
    if isinstance(value, dict):
        return (type(value), {k: _typed(v) for k, v in value.items()})
    return (type(value), value)
