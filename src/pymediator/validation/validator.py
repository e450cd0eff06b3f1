"""AbstractValidator — declare rules in ``__init__``, evaluate with ``validate_async``.

Usage::

    class CreateUserCommandValidator(AbstractValidator[CreateUserCommand]):
        def __init__(self) -> None:
            super().__init__()
            self.rule_for("email").must_be_defined().not_empty().email()
            self.rule_for(lambda x: x.age).must_be(lambda age: age >= 0)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import anyio

from pymediator.validation.result import ValidationResult, dedupe_failures
from pymediator.validation.rules import Rule, RuleBuilder, attribute_selector

T = TypeVar("T")

FALLBACK_PROPERTY_NAME = "Property"


class _AttributeRecorder:
    """Stand-in instance that records attribute reads made by a selector.

    The read log lives in a name-mangled slot so a model field called
    ``accessed`` (or anything else) still reaches ``__getattr__``.
    """

    def __init__(self, reads: list[str]) -> None:
        self.__reads = reads

    def __getattr__(self, name: str) -> Any:
        # Dunder lookups come from the interpreter, not from the selector.
        if name.startswith("__"):
            raise AttributeError(name)
        self.__reads.append(name)
        return None


def infer_property_name(selector: Callable[[Any], Any]) -> str:
    """Recover the property a selector reads, or ``"Property"`` when unclear.

    The selector runs once against a recording stand-in. Exactly one
    attribute read yields that attribute's name; zero reads, chained reads,
    or an exception fall back to the generic label.
    """
    reads: list[str] = []
    try:
        selector(_AttributeRecorder(reads))
    except Exception:
        return FALLBACK_PROPERTY_NAME
    if len(reads) == 1:
        return reads[0]
    return FALLBACK_PROPERTY_NAME


class AbstractValidator(Generic[T]):
    """Base class for request validators.

    Rules are appended only while the subclass is being constructed and
    are treated as read-only once validation starts.
    """

    def __init__(self) -> None:
        self._rules: list[Rule] = []

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    def rule_for(
        self,
        selector: str | Callable[[T], Any],
        *,
        name: str | None = None,
    ) -> RuleBuilder[T, Any]:
        """Start a rule chain for one property.

        Args:
            selector: Property name, or an accessor such as ``lambda x: x.email``.
            name: Explicit property label for failures. Defaults to the
                string selector or the name inferred from the accessor.
        """
        if isinstance(selector, str):
            property_name = name or selector
            read = attribute_selector(selector)
        else:
            property_name = name or infer_property_name(selector)
            read = selector
        rule = Rule(property_name=property_name, selector=read)
        self._rules.append(rule)
        return RuleBuilder(rule)

    async def validate_async(self, instance: T) -> ValidationResult:
        failures = []
        for rule in self._rules:
            failures.extend(await rule.evaluate(instance))
        return ValidationResult(errors=dedupe_failures(failures))

    def validate(self, instance: T) -> ValidationResult:
        """Blocking variant for callers outside an event loop."""
        return anyio.run(self.validate_async, instance)
