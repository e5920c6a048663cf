"""Property references: a resolved (name, accessor) pair per model property.

Selectors are plain property names or explicit ``PropertyRef`` pairs. Lambdas
and other expressions are rejected up front; nothing is introspected at
evaluation time.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ruleknobs_common import ConfigurationError

logger = logging.getLogger(__name__)

Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class PropertyRef:
    """One property of the validated type.

    Attributes:
        name: Property name used as the error key
        accessor: Callable reading the property from an instance
        annotation: Declared type of the property, when known
    """

    name: str
    accessor: Accessor
    annotation: Any = None

    @classmethod
    def of(cls, name: str, accessor: Accessor, annotation: Any = None) -> PropertyRef:
        """Build an explicit (name, accessor) pair.

        Args:
            name: Property name used as the error key
            accessor: Callable reading the value from an instance
            annotation: Optional declared type of the value

        Raises:
            ConfigurationError: If the name is not an identifier or the
                accessor is not callable
        """
        _check_name(name)
        if not callable(accessor):
            raise ConfigurationError(
                f"Accessor for '{name}' must be callable",
                context={"property": name, "accessor": repr(accessor)},
            )
        return cls(name, accessor, annotation)

    def read(self, instance: Any) -> Any:
        """Read this property's value from ``instance``."""
        return self.accessor(instance)


def attribute_accessor(name: str) -> Accessor:
    """Accessor reading ``name`` from mappings or object attributes.

    Mappings are read with ``.get`` so a missing key reads as None. Objects
    are read with ``getattr`` and a missing attribute raises AttributeError.
    """

    def read(instance: Any) -> Any:
        if isinstance(instance, Mapping):
            return instance.get(name)
        return getattr(instance, name)

    read.__name__ = f"read_{name}"
    return read


def resolve_property(selector: Any, model: type | None = None) -> PropertyRef:
    """Resolve a selector into a PropertyRef.

    Args:
        selector: A property name or a PropertyRef
        model: The validated type, when known; names are checked against it

    Returns:
        Resolved PropertyRef

    Raises:
        ConfigurationError: If the selector does not name a property
    """
    if isinstance(selector, PropertyRef):
        return selector

    if selector is None:
        raise ConfigurationError("Property selector cannot be None")

    if not isinstance(selector, str):
        raise ConfigurationError(
            "Property selector must be a property name or a PropertyRef, "
            f"got {type(selector).__name__}",
            context={"selector": repr(selector)},
        )

    _check_name(selector)
    annotation = None
    if model is not None:
        annotation = _lookup_annotation(model, selector)

    logger.debug(f"Resolved property '{selector}' (annotation={annotation!r})")
    return PropertyRef(selector, attribute_accessor(selector), annotation)


def _check_name(name: Any) -> None:
    if not isinstance(name, str) or not name.isidentifier():
        raise ConfigurationError(
            f"'{name}' is not a direct property name",
            context={"selector": repr(name)},
        )


def _lookup_annotation(model: type, name: str) -> Any:
    """Return the declared type of ``name`` on ``model``.

    Raises:
        ConfigurationError: If ``model`` has no such property
    """
    hints = _type_hints(model)
    if name in hints:
        return hints[name]

    if dataclasses.is_dataclass(model) and any(
        f.name == name for f in dataclasses.fields(model)
    ):
        return None

    if hasattr(model, name):
        attr = getattr(model, name)
        if isinstance(attr, property) and attr.fget is not None:
            return _type_hints(attr.fget).get("return")
        if callable(attr):
            raise ConfigurationError(
                f"'{name}' is a method of {model.__name__}, not a property",
                context={"property": name, "model": model.__name__},
            )
        return None

    raise ConfigurationError(
        f"Unknown property '{name}' on {model.__name__}",
        context={"property": name, "model": model.__name__},
    )


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):  # unresolvable forward references
        return dict(getattr(obj, "__annotations__", {}))
