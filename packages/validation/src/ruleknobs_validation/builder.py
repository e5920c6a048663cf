"""Fluent rule builder bound to one property of a validator.

Each synchronous check appends a (predicate, message) entry to the builder's
buffer. The first one also registers a single BatchedRule with the validator;
that rule reads the buffer when the validator runs, so checks chained later
are included. Asynchronous and dependent checks are registered on their own
as StandaloneRules at the point where they are declared.

Example:
    ```python
    validator.rule_for("name").not_null().not_empty().minimum_length(3)
    validator.rule_for("email").email().with_message("Bad email")
    ```
"""

from __future__ import annotations

import logging
import types
import typing
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from decimal import Decimal
from enum import Enum
from numbers import Number, Real
from re import Pattern as RegexPattern
from typing import TYPE_CHECKING, Any

from ruleknobs_common import ConfigurationError

from . import messages
from . import predicates as p
from .properties import PropertyRef, resolve_property
from .rules import BatchedRule, PredicateEntry, StandaloneRule

if TYPE_CHECKING:
    from .validator import Validator

logger = logging.getLogger(__name__)


class BuilderState(Enum):
    """Whether a builder's batched rule has been registered yet."""

    ACCUMULATING = "accumulating"
    MATERIALIZED = "materialized"


class RuleBuilder:
    """Accumulates checks for one property; every method returns the builder."""

    def __init__(self, validator: Validator[Any], prop: PropertyRef):
        """Initialize the builder.

        Args:
            validator: Validator that receives the registered rules
            prop: Property the checks apply to
        """
        self._validator = validator
        self._prop = prop
        self._entries: list[PredicateEntry] = []
        self._state = BuilderState.ACCUMULATING

    @property
    def property_name(self) -> str:
        return self._prop.name

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def entries(self) -> tuple[PredicateEntry, ...]:
        return tuple(self._entries)

    def _format(self, template: str, **operands: Any) -> str:
        return template.format(field=self._prop.name, **operands)

    def _append(self, predicate: Callable[[Any], bool], message: str) -> RuleBuilder:
        self._entries.append(PredicateEntry(predicate, message))
        if self._state is BuilderState.ACCUMULATING:
            self._validator._add_rule(BatchedRule(self._prop, self._entries))
            self._state = BuilderState.MATERIALIZED
            logger.debug(f"Registered batched rule for '{self._prop.name}'")
        return self

    def with_message(self, message: str | None) -> RuleBuilder:
        """Replace the message of the most recently added check.

        Does nothing when no synchronous check has been added yet. ``None``
        restores the validator's default message.
        """
        if not self._entries:
            return self
        if message is None:
            message = self._format(self._validator.settings.default_message)
        last = self._entries[-1]
        self._entries[-1] = PredicateEntry(last.predicate, message)
        return self

    # Presence

    def not_null(self) -> RuleBuilder:
        return self._append(p.is_not_null, self._format(messages.NOT_NULL))

    def null(self) -> RuleBuilder:
        return self._append(p.is_null, self._format(messages.NULL))

    def not_empty(self) -> RuleBuilder:
        return self._append(p.is_not_empty, self._format(messages.NOT_EMPTY))

    def empty(self) -> RuleBuilder:
        return self._append(p.is_empty, self._format(messages.EMPTY))

    # Length and text

    def minimum_length(self, length: int) -> RuleBuilder:
        return self._append(
            lambda value: p.has_min_length(value, length),
            self._format(messages.MINIMUM_LENGTH, length=length),
        )

    def maximum_length(self, length: int) -> RuleBuilder:
        return self._append(
            lambda value: p.has_max_length(value, length),
            self._format(messages.MAXIMUM_LENGTH, length=length),
        )

    def matches(self, pattern: str | RegexPattern) -> RuleBuilder:
        return self._append(
            lambda value: p.matches(value, pattern), self._format(messages.MATCHES)
        )

    def starts_with(self, prefix: str) -> RuleBuilder:
        return self._append(
            lambda value: p.starts_with(value, prefix),
            self._format(messages.STARTS_WITH, prefix=prefix),
        )

    def ends_with(self, suffix: str) -> RuleBuilder:
        return self._append(
            lambda value: p.ends_with(value, suffix),
            self._format(messages.ENDS_WITH, suffix=suffix),
        )

    def must_contain(self, substring: str, case_sensitive: bool = False) -> RuleBuilder:
        return self._append(
            lambda value: p.contains(value, substring, case_sensitive),
            self._format(messages.MUST_CONTAIN, substring=substring),
        )

    # Comparison

    def equal_to(self, other: Any) -> RuleBuilder:
        return self._append(
            lambda value: p.equals(value, other),
            self._format(messages.EQUAL_TO, other=other),
        )

    def greater_than(self, threshold: Any) -> RuleBuilder:
        return self._append(
            lambda value: p.greater_than(value, threshold),
            self._format(messages.GREATER_THAN, threshold=threshold),
        )

    def less_than(self, threshold: Any) -> RuleBuilder:
        return self._append(
            lambda value: p.less_than(value, threshold),
            self._format(messages.LESS_THAN, threshold=threshold),
        )

    def between(self, minimum: Any, maximum: Any) -> RuleBuilder:
        return self._append(
            lambda value: p.between(value, minimum, maximum),
            self._format(messages.BETWEEN, minimum=minimum, maximum=maximum),
        )

    # Sign

    def positive(self) -> RuleBuilder:
        self._require_numeric("positive")
        return self._append(p.is_positive, self._format(messages.POSITIVE))

    def negative(self) -> RuleBuilder:
        self._require_numeric("negative")
        return self._append(p.is_negative, self._format(messages.NEGATIVE))

    def not_zero(self) -> RuleBuilder:
        self._require_numeric("not_zero")
        return self._append(p.is_not_zero, self._format(messages.NOT_ZERO))

    def _require_numeric(self, check: str) -> None:
        if _is_numeric_annotation(self._prop.annotation) is False:
            raise ConfigurationError(
                f"'{check}' needs a numeric property, but '{self._prop.name}' "
                f"is declared as {self._prop.annotation!r}",
                context={"property": self._prop.name, "check": check},
            )

    # Dates, relative to the validator's clock at evaluation time

    def future_date(self) -> RuleBuilder:
        return self._append(
            lambda value: p.is_future(value, self._now()),
            self._format(messages.FUTURE_DATE),
        )

    def past_date(self) -> RuleBuilder:
        return self._append(
            lambda value: p.is_past(value, self._now()),
            self._format(messages.PAST_DATE),
        )

    def today(self) -> RuleBuilder:
        return self._append(
            lambda value: p.is_today(value, self._now()),
            self._format(messages.TODAY),
        )

    def _now(self) -> datetime:
        return self._validator.settings.now()

    # Membership and collections

    def is_in(self, values: Iterable[Any]) -> RuleBuilder:
        allowed = tuple(values)
        return self._append(
            lambda value: p.is_in(value, allowed), self._format(messages.IN)
        )

    def has_count(self, count: int) -> RuleBuilder:
        return self._append(
            lambda value: p.has_count(value, count),
            self._format(messages.HAS_COUNT, count=count),
        )

    def not_empty_collection(self) -> RuleBuilder:
        return self._append(
            p.is_non_empty_collection, self._format(messages.NOT_EMPTY_COLLECTION)
        )

    # Shape

    def is_alpha(self) -> RuleBuilder:
        return self._append(p.is_alpha, self._format(messages.ALPHA))

    def is_alphanumeric(self) -> RuleBuilder:
        return self._append(p.is_alphanumeric, self._format(messages.ALPHANUMERIC))

    def is_numeric(self) -> RuleBuilder:
        return self._append(p.is_numeric, self._format(messages.NUMERIC))

    def email(self) -> RuleBuilder:
        return self._append(p.is_email, self._format(messages.EMAIL))

    def url(self) -> RuleBuilder:
        return self._append(p.is_url, self._format(messages.URL))

    # Custom checks

    def must(self, predicate: Callable[[Any], bool] | None) -> RuleBuilder:
        """Add a custom synchronous check; ``None`` always passes."""
        if predicate is None:
            predicate = _always
        elif not callable(predicate):
            raise ConfigurationError(
                f"Predicate for '{self._prop.name}' must be callable",
                context={"property": self._prop.name, "predicate": repr(predicate)},
            )
        return self._append(predicate, self._format(messages.MUST))

    def must_async(
        self,
        predicate: Callable[[Any], Awaitable[bool]] | None,
        message: str | None = None,
    ) -> RuleBuilder:
        """Register an asynchronous check on this property.

        Args:
            predicate: Coroutine function (or function returning an awaitable)
                taking the property value
            message: Optional text replacing the default message

        Raises:
            ConfigurationError: If predicate is None or not callable
        """
        self._check_callable(predicate, "must_async")
        prop = self._prop
        if message is None:
            message = self._format(messages.MUST_ASYNC)
        rule = StandaloneRule(
            prop,
            lambda instance: predicate(prop.read(instance)),
            message,
        )
        self._validator._add_rule(rule)
        logger.debug(f"Registered async rule for '{prop.name}'")
        return self

    def dependent_rule_async(
        self,
        dependent: Any,
        predicate: Callable[[Any, Any], Awaitable[bool]] | None,
        message: str | None = None,
    ) -> RuleBuilder:
        """Register an asynchronous check over this property and another one.

        The error, if any, is recorded under this builder's property.

        Args:
            dependent: Selector of the second property (name or PropertyRef)
            predicate: Coroutine function taking (value, dependent_value)
            message: Optional text replacing the default message

        Raises:
            ConfigurationError: If the selector or predicate is missing or invalid
        """
        if dependent is None:
            raise ConfigurationError(
                f"Dependent property selector for '{self._prop.name}' cannot be None",
                context={"property": self._prop.name},
            )
        self._check_callable(predicate, "dependent_rule_async")
        other = resolve_property(dependent, self._validator.model)
        prop = self._prop
        if message is None:
            message = self._format(messages.DEPENDENT, dependent=other.name)
        rule = StandaloneRule(
            prop,
            lambda instance: predicate(prop.read(instance), other.read(instance)),
            message,
        )
        self._validator._add_rule(rule)
        logger.debug(f"Registered dependent rule for '{prop.name}' on '{other.name}'")
        return self

    def _check_callable(self, predicate: Any, check: str) -> None:
        if predicate is None or not callable(predicate):
            raise ConfigurationError(
                f"'{check}' on '{self._prop.name}' needs a callable predicate",
                context={"property": self._prop.name, "predicate": repr(predicate)},
            )

    def __repr__(self) -> str:
        return (
            f"RuleBuilder({self._prop.name!r}, state={self._state.value}, "
            f"checks={len(self._entries)})"
        )


def _always(value: Any) -> bool:
    return True


def _is_numeric_annotation(annotation: Any) -> bool | None:
    """Whether a declared type is numeric; None when it cannot be told."""
    if annotation is None or isinstance(annotation, str):
        return None
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        verdicts = [_is_numeric_annotation(a) for a in members]
        if any(v is None for v in verdicts):
            return None
        return any(verdicts)
    if origin is typing.Annotated:
        return _is_numeric_annotation(typing.get_args(annotation)[0])
    if origin is not None:
        annotation = origin
    if annotation is Any or not isinstance(annotation, type):
        return None
    if issubclass(annotation, bool):
        return False
    if issubclass(annotation, (Real, Decimal)):
        return True
    # Number and Complex may still hold real values at runtime
    if issubclass(annotation, Number):
        return None
    return False
