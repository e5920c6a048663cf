"""Rule executors: the registered, evaluatable units of a validator.

A rule is called with the instance under validation and returns the list of
(property, message) pairs it wants recorded. Immediate rules return the list
directly; suspending rules return an awaitable of it.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .properties import PropertyRef

ErrorList = list[tuple[str, str]]


@dataclass(frozen=True)
class PredicateEntry:
    """A synchronous check waiting in a builder's buffer."""

    predicate: Callable[[Any], bool]
    message: str


class RuleExecutor(ABC):
    """Base class for registered rules.

    Attributes:
        prop: The property whose name keys this rule's errors
        suspending: True when calling the rule returns an awaitable
    """

    suspending: bool = False

    def __init__(self, prop: PropertyRef):
        self.prop = prop

    @property
    def property_name(self) -> str:
        return self.prop.name

    @abstractmethod
    def __call__(self, instance: Any) -> ErrorList | Awaitable[ErrorList]:
        """Evaluate this rule against ``instance``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.prop.name!r})"


class BatchedRule(RuleExecutor):
    """All synchronous checks declared on one property.

    Holds the builder's entry list itself rather than a copy, so checks
    appended after registration are still evaluated.
    """

    def __init__(self, prop: PropertyRef, entries: Sequence[PredicateEntry]):
        super().__init__(prop)
        self._entries = entries

    @property
    def entries(self) -> tuple[PredicateEntry, ...]:
        return tuple(self._entries)

    def __call__(self, instance: Any) -> ErrorList:
        value = self.prop.read(instance)
        name = self.prop.name
        return [
            (name, entry.message)
            for entry in tuple(self._entries)
            if not entry.predicate(value)
        ]

    def __repr__(self) -> str:
        return f"BatchedRule({self.prop.name!r}, checks={len(self._entries)})"


class StandaloneRule(RuleExecutor):
    """One asynchronous check, registered on its own.

    ``check`` receives the whole instance so it can read a second property;
    it may return a bool or an awaitable of one.
    """

    suspending = True

    def __init__(
        self,
        prop: PropertyRef,
        check: Callable[[Any], bool | Awaitable[bool]],
        message: str,
    ):
        super().__init__(prop)
        self._check = check
        self.message = message

    async def __call__(self, instance: Any) -> ErrorList:
        outcome = self._check(instance)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if outcome:
            return []
        return [(self.prop.name, self.message)]
