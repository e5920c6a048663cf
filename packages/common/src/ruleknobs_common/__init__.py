"""Common utilities and base classes for ruleknobs packages.

This package provides shared functionality used across ruleknobs packages:

- **Exceptions**: Unified exception hierarchy with context support
- **Registry**: Generic thread-safe registry for keyed items

Example:
    ```python
    from ruleknobs_common import ConfigurationError, Registry

    raise ConfigurationError("Something is miswired", context={"details": "here"})

    registry = Registry[str, int]("my_registry")
    registry.register("key", 1)
    ```
"""

from ruleknobs_common.exceptions import (
    ConfigurationError,
    NotFoundError,
    OperationError,
    RuleknobsError,
    ValidationError,
)
from ruleknobs_common.registry import Registry, describe_key

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "RuleknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    # Registry
    "Registry",
    "describe_key",
]
