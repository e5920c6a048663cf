"""Validator: an ordered list of rules for one type, and the code that runs it.

Rules run one at a time in registration order, both in ``validate`` and in
``validate_async``, so the two produce the same ValidationResult.

Example:
    ```python
    @dataclass
    class User:
        name: str
        email: str
        age: int

    class UserValidator(Validator[User]):
        def configure(self) -> None:
            self.rule_for("name").not_null().not_empty().minimum_length(3)
            self.rule_for("email").not_null().not_empty().email()
            self.rule_for("age").not_zero().positive()

    result = UserValidator().validate(User(name="", email="x", age=0))
    if not result.is_valid:
        for field, errors in result.errors.items():
            print(field, errors)
    ```
"""

from __future__ import annotations

import asyncio
import logging
import typing
from collections.abc import Coroutine
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Generic, Protocol, TypeVar

from ruleknobs_common import OperationError

from .builder import RuleBuilder
from .properties import resolve_property
from .result import ValidationResult
from .rules import ErrorList, RuleExecutor
from .settings import ValidationSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationSignal(Protocol):
    """Anything with ``is_set()``: threading.Event, asyncio.Event, ..."""

    def is_set(self) -> bool: ...


class Validator(Generic[T]):
    """Holds the rules for a type and evaluates them against instances.

    Subclasses declare their rules in ``configure()``, which runs once from
    the constructor. The validated type is taken from the generic argument
    (``Validator[User]``) or from an explicit ``model`` class attribute; when
    known, property names are checked against it as rules are declared.

    Attributes:
        model: The validated type, or None when undeclared
        settings: Settings shared by this validator's rules
    """

    model: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "model" in cls.__dict__:
            return
        for base in cls.__dict__.get("__orig_bases__", ()):
            origin = typing.get_origin(base)
            if isinstance(origin, type) and issubclass(origin, Validator):
                args = typing.get_args(base)
                if args and isinstance(args[0], type):
                    cls.model = args[0]
                    break

    def __init__(self, settings: ValidationSettings | None = None):
        """Initialize the validator and declare its rules.

        Args:
            settings: Optional settings; defaults are used when omitted
        """
        self.settings = settings or ValidationSettings()
        self._rules: list[RuleExecutor] = []
        self.configure()

    def configure(self) -> None:
        """Declare rules. Subclasses override this."""

    @property
    def rules(self) -> tuple[RuleExecutor, ...]:
        """Registered rules in evaluation order."""
        return tuple(self._rules)

    def rule_for(self, selector: Any) -> RuleBuilder:
        """Start a rule chain for one property.

        Args:
            selector: Property name or PropertyRef

        Returns:
            A new RuleBuilder bound to that property

        Raises:
            ConfigurationError: If the selector does not name a property
        """
        return RuleBuilder(self, resolve_property(selector, self.model))

    def _add_rule(self, rule: RuleExecutor) -> None:
        self._rules.append(rule)

    def validate(
        self, instance: T, cancel: CancellationSignal | None = None
    ) -> ValidationResult:
        """Run every rule against ``instance``, blocking on asynchronous ones.

        Args:
            instance: Object (or mapping) to validate
            cancel: Optional signal; once set, remaining rules are skipped and
                the partial result is returned

        Returns:
            ValidationResult with every failing check's message
        """
        result = ValidationResult()
        rules = tuple(self._rules)
        logger.debug(f"Validating {type(instance).__name__} with {len(rules)} rules")
        for index, rule in enumerate(rules):
            if cancel is not None and cancel.is_set():
                self._log_cancelled(index, len(rules))
                break
            if rule.suspending:
                errors = self._resolve_blocking(rule(instance))
            else:
                errors = rule(instance)
            _collect(result, errors)
        return result

    async def validate_async(
        self, instance: T, cancel: CancellationSignal | None = None
    ) -> ValidationResult:
        """Run every rule against ``instance``, awaiting asynchronous ones.

        Args:
            instance: Object (or mapping) to validate
            cancel: Optional signal; once set, remaining rules are skipped and
                the partial result is returned

        Returns:
            ValidationResult identical to what ``validate`` produces
        """
        result = ValidationResult()
        rules = tuple(self._rules)
        logger.debug(f"Validating {type(instance).__name__} with {len(rules)} rules (async)")
        for index, rule in enumerate(rules):
            if cancel is not None and cancel.is_set():
                self._log_cancelled(index, len(rules))
                break
            if rule.suspending:
                errors = await rule(instance)
            else:
                errors = rule(instance)
            _collect(result, errors)
        return result

    def _resolve_blocking(self, coro: Coroutine[Any, Any, ErrorList]) -> ErrorList:
        """Drive a suspending rule to completion from synchronous code."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)

        if not self.settings.allow_blocking_in_loop:
            coro.close()
            raise OperationError(
                "validate() met an asynchronous rule inside a running event loop; "
                "use validate_async() instead",
                context={"validator": type(self).__name__},
            )
        # The calling thread owns a running loop, so use a private one elsewhere.
        with ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(asyncio.run, coro).result()

    def _log_cancelled(self, index: int, total: int) -> None:
        logger.info(
            f"{type(self).__name__}: validation cancelled after {index} of {total} rules"
        )

    def __repr__(self) -> str:
        model = self.model.__name__ if self.model else None
        return f"{type(self).__name__}(model={model}, rules={len(self._rules)})"


def _collect(result: ValidationResult, errors: ErrorList) -> None:
    for property_name, message in errors:
        result.add_error(property_name, message)
