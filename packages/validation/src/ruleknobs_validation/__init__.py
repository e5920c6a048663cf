"""Fluent, per-property validation rules for arbitrary Python objects.

This package provides:
- A fluent rule builder per property (``rule_for("name").not_empty()...``)
- Synchronous and asynchronous evaluation with identical, ordered results
- Dependent checks over two properties of the same instance
- A registry that discovers validator classes in a module
"""

from .builder import BuilderState, RuleBuilder
from .properties import PropertyRef, attribute_accessor, resolve_property
from .registry import ValidatorRegistry
from .result import ValidationResult
from .rules import BatchedRule, ErrorList, PredicateEntry, RuleExecutor, StandaloneRule
from .settings import ValidationSettings
from .validator import CancellationSignal, Validator

__all__ = [
    # Validators
    "Validator",
    "ValidatorRegistry",
    "CancellationSignal",
    # Rule building
    "RuleBuilder",
    "BuilderState",
    # Rules
    "RuleExecutor",
    "BatchedRule",
    "StandaloneRule",
    "PredicateEntry",
    "ErrorList",
    # Properties
    "PropertyRef",
    "resolve_property",
    "attribute_accessor",
    # Results and settings
    "ValidationResult",
    "ValidationSettings",
]
