"""Fluent validation — per-property rule chains evaluated asynchronously."""

from pymediator.validation.result import ValidationFailure, ValidationResult
from pymediator.validation.rules import RuleBuilder
from pymediator.validation.validator import AbstractValidator

__all__ = ["AbstractValidator", "RuleBuilder", "ValidationFailure", "ValidationResult"]
