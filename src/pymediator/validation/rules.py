"""Fluent rule builder — one chain of predicates per property.

Predicates run in declaration order and never short-circuit, so a single
pass can report several independent failures for one property.
``with_message`` overrides the message of the predicate declared
immediately before it.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Awaitable, Callable, Mapping, Sized
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Generic, TypeVar

from pymediator.validation.result import ValidationFailure

T = TypeVar("T")
TProperty = TypeVar("TProperty")

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

PredicateFn = Callable[[Any], "bool | Awaitable[bool]"]


@dataclass(frozen=True)
class Predicate:
    """A single check plus the message reported when it fails."""

    test: PredicateFn
    message: str

    async def evaluate(self, property_name: str, value: Any) -> ValidationFailure | None:
        outcome = self.test(value)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if outcome:
            return None
        return ValidationFailure(
            property_name=property_name,
            message=self.message,
            attempted_value=value,
        )


@dataclass
class Rule:
    """Predicates bound to one property of the validated model."""

    property_name: str
    selector: Callable[[Any], Any]
    predicates: list[Predicate] = field(default_factory=list)

    def read(self, instance: Any) -> Any:
        """Read the property value; missing attributes and keys read as None."""
        try:
            return self.selector(instance)
        except (AttributeError, KeyError):
            return None

    async def evaluate(self, instance: Any) -> list[ValidationFailure]:
        value = self.read(instance)
        failures: list[ValidationFailure] = []
        for predicate in self.predicates:
            try:
                failure = await predicate.evaluate(self.property_name, value)
            except Exception as exc:
                failure = ValidationFailure(
                    property_name=self.property_name,
                    message=f"'{self.property_name}' validation raised an exception: {exc}",
                    attempted_value=value,
                )
            if failure is not None:
                failures.append(failure)
        return failures


def attribute_selector(name: str) -> Callable[[Any], Any]:
    """Build a selector reading *name* from an object or a mapping."""

    def select(instance: Any) -> Any:
        if isinstance(instance, Mapping):
            return instance.get(name)
        return getattr(instance, name, None)

    select.__name__ = f"select_{name}"
    return select


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class RuleBuilder(Generic[T, TProperty]):
    """Chainable predicate declarations for one :class:`Rule`."""

    def __init__(self, rule: Rule) -> None:
        self._rule = rule

    @property
    def property_name(self) -> str:
        return self._rule.property_name

    def _add(self, test: PredicateFn, message: str) -> RuleBuilder[T, TProperty]:
        self._rule.predicates.append(Predicate(test=test, message=message))
        return self

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    def must_be_defined(self) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: value is not None,
            f"'{self.property_name}' must be defined.",
        )

    def not_empty(self) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not _is_blank(value),
            f"'{self.property_name}' must not be empty.",
        )

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def email(self) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not isinstance(value, str) or bool(EMAIL_PATTERN.match(value)),
            f"'{self.property_name}' must be a valid email address.",
        )

    def matches(self, pattern: str | re.Pattern[str]) -> RuleBuilder[T, TProperty]:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self._add(
            lambda value: not isinstance(value, str) or bool(compiled.search(value)),
            f"'{self.property_name}' is not in the correct format.",
        )

    def min_length(self, length: int) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not isinstance(value, Sized) or len(value) >= length,
            f"'{self.property_name}' must be at least {length} characters long.",
        )

    def max_length(self, length: int) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not isinstance(value, Sized) or len(value) <= length,
            f"'{self.property_name}' must not exceed {length} characters.",
        )

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def range(self, low: Real, high: Real) -> RuleBuilder[T, TProperty]:
        """Inclusive ``low <= value <= high``."""
        if low > high:
            msg = f"range() lower bound {low} exceeds upper bound {high}"
            raise ValueError(msg)
        return self._add(
            lambda value: not _is_number(value) or low <= value <= high,
            f"'{self.property_name}' must be between {low} and {high}.",
        )

    def greater_than_or_equal_to(self, bound: Real) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not _is_number(value) or value >= bound,
            f"'{self.property_name}' must be greater than or equal to {bound}.",
        )

    def less_than_or_equal_to(self, bound: Real) -> RuleBuilder[T, TProperty]:
        return self._add(
            lambda value: not _is_number(value) or value <= bound,
            f"'{self.property_name}' must be less than or equal to {bound}.",
        )

    # ------------------------------------------------------------------
    # Custom predicates
    # ------------------------------------------------------------------

    def must_be(self, predicate: Callable[[Any], bool]) -> RuleBuilder[T, TProperty]:
        """Synchronous custom check. Coroutine predicates belong in :meth:`must_be_async`."""
        if inspect.iscoroutinefunction(predicate):
            msg = "must_be() needs a synchronous predicate; use must_be_async()"
            raise TypeError(msg)

        def check(value: Any) -> bool:
            outcome = predicate(value)
            if inspect.isawaitable(outcome):
                if inspect.iscoroutine(outcome):
                    outcome.close()
                msg = "must_be() predicate returned an awaitable; use must_be_async()"
                raise TypeError(msg)
            return bool(outcome)

        return self._add(check, f"'{self.property_name}' does not meet the required condition.")

    def must_be_async(
        self, predicate: Callable[[Any], bool | Awaitable[bool]]
    ) -> RuleBuilder[T, TProperty]:
        async def check(value: Any) -> bool:
            outcome = predicate(value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return bool(outcome)

        return self._add(
            check,
            f"'{self.property_name}' does not meet the required async condition.",
        )

    def must_exist_in(
        self,
        async_check: Callable[[Any], Awaitable[bool]],
        entity_name: str | None = None,
    ) -> RuleBuilder[T, TProperty]:
        """Fail unless *async_check* confirms the value exists (e.g. a foreign key)."""
        return self._add(
            async_check,
            f"'{self.property_name}' must exist in {entity_name or 'the system'}.",
        )

    def must_be_unique(
        self,
        async_check: Callable[[Any], Awaitable[bool]],
        entity_name: str | None = None,
    ) -> RuleBuilder[T, TProperty]:
        """Fail unless *async_check* confirms no other record holds the value."""
        scope = f" in {entity_name}" if entity_name else ""
        return self._add(
            async_check,
            f"'{self.property_name}' must be unique{scope}.",
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def with_message(self, message: str) -> RuleBuilder[T, TProperty]:
        """Override the failure message of the preceding predicate."""
        if not self._rule.predicates:
            msg = f"with_message() on '{self.property_name}' has no preceding predicate"
            raise ValueError(msg)
        last = self._rule.predicates[-1]
        self._rule.predicates[-1] = replace(last, message=message)
        return self
