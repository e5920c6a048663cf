"""Registry mapping model types to their validator classes.

Validators can be registered one by one or discovered from a module. Every
lookup builds a fresh validator, which is safe because a validator's rules do
not change after construction.

Example:
    ```python
    registry = ValidatorRegistry()
    registry.register_module("myapp.validators")
    result = registry.create(User).validate(user)
    ```
"""

from __future__ import annotations

import importlib
import inspect
import logging
from types import ModuleType
from typing import Any

from ruleknobs_common import ConfigurationError, Registry

from .settings import ValidationSettings
from .validator import Validator

logger = logging.getLogger(__name__)


class ValidatorRegistry(Registry[type, type[Validator[Any]]]):
    """Lookup of validator classes by the type they validate."""

    def __init__(self, name: str = "validators"):
        super().__init__(name)

    def register_validator(
        self,
        validator_cls: type[Validator[Any]],
        model: type | None = None,
        allow_overwrite: bool = False,
    ) -> type:
        """Register a validator class.

        Args:
            validator_cls: Concrete Validator subclass
            model: Validated type; defaults to the class's own model
            allow_overwrite: Replace an existing registration for the model

        Returns:
            The model the class was registered under

        Raises:
            ConfigurationError: If the class is not a Validator or has no model
            OperationError: If the model already has a validator
        """
        if not (isinstance(validator_cls, type) and issubclass(validator_cls, Validator)):
            raise ConfigurationError(
                f"{validator_cls!r} is not a Validator subclass",
                context={"validator": repr(validator_cls)},
            )
        model = model or validator_cls.model
        if model is None:
            raise ConfigurationError(
                f"{validator_cls.__name__} does not declare the type it validates",
                context={"validator": validator_cls.__name__},
            )
        self.register(
            model,
            validator_cls,
            metadata={"module": validator_cls.__module__},
            allow_overwrite=allow_overwrite,
        )
        logger.debug(f"Registered {validator_cls.__name__} for {model.__name__}")
        return model

    def register_module(self, module: ModuleType | str) -> int:
        """Register every concrete validator class defined in a module.

        Classes imported into the module from elsewhere are skipped, as are
        abstract classes and validators without a model. Subclasses that only
        inherit their model from another validator are skipped too, so a
        specialized validator never collides with its base; register those
        explicitly with ``register_validator(cls, model=...)``.

        Args:
            module: Module object or dotted module name

        Returns:
            Number of validators registered
        """
        if isinstance(module, str):
            module = importlib.import_module(module)

        registered = 0
        for _, member in inspect.getmembers(module, inspect.isclass):
            if (
                member is Validator
                or not issubclass(member, Validator)
                or member.__module__ != module.__name__
                or inspect.isabstract(member)
            ):
                continue
            if member.model is None:
                logger.warning(
                    f"Skipping {member.__name__}: no model type declared"
                )
                continue
            if "model" not in member.__dict__:
                logger.debug(
                    f"Skipping {member.__name__}: model {member.model.__name__} "
                    "is inherited from a base validator"
                )
                continue
            self.register_validator(member)
            registered += 1

        logger.info(f"Registered {registered} validators from {module.__name__}")
        return registered

    def create(self, model: type, settings: ValidationSettings | None = None) -> Validator[Any]:
        """Build a new validator for ``model``.

        Raises:
            NotFoundError: If no validator is registered for the model
        """
        return self.get(model)(settings=settings)

    def models(self) -> list[type]:
        """Registered model types in registration order."""
        return self.list_keys()
