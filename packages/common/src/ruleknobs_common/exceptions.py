"""Common exception hierarchy for all ruleknobs packages.

Every ruleknobs error carries an optional context dictionary with structured
details about what went wrong, so callers can log or inspect it without
parsing messages.

The hierarchy separates programming mistakes from data outcomes:
- ConfigurationError: a rule or validator was declared incorrectly
- ValidationError: an explicit, opt-in signal that data failed validation
- NotFoundError: a registry lookup missed
- OperationError: an operation could not be carried out

Example:
    ```python
    from ruleknobs_common.exceptions import ConfigurationError

    raise ConfigurationError(
        "Selector must name a property",
        context={"selector": repr(selector)}
    )

    # Catch any ruleknobs error
    try:
        registry.get(User)
    except RuleknobsError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class RuleknobsError(Exception):
    """Base exception for all ruleknobs packages.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (property names, types, etc.)
        details: Alternative to context (takes precedence when both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (replaces context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(RuleknobsError):
    """Raised when a caller asks for failed validation to become an exception.

    Validators never raise this on their own; failing data is reported through
    a ValidationResult. ``ValidationResult.raise_for_errors()`` converts a
    failed result into this exception with the errors in its context.

    Example:
        ```python
        raise ValidationError(
            "Validation failed",
            context={"errors": {"email": ["The email field must be a valid email address."]}}
        )
        ```
    """

    @property
    def errors(self) -> Dict[str, Any]:
        """Errors keyed by property name, when the raiser supplied them."""
        return self.context.get("errors", {})


class ConfigurationError(RuleknobsError):
    """Raised when rules or validators are declared incorrectly.

    This is a setup-time programming mistake, not a data problem:
    - A selector that does not name a property of the model
    - A missing predicate where one is required
    - A sign check on a non-numeric property
    - A validator class with no resolvable model type
    - An unreadable settings file

    Example:
        ```python
        raise ConfigurationError(
            "Unknown property 'emial' on User",
            context={"property": "emial", "model": "User"}
        )
        ```
    """

    pass


class NotFoundError(RuleknobsError):
    """Raised when a requested item is not registered.

    Example:
        ```python
        raise NotFoundError(
            "No validator registered for Order",
            context={"model": "Order", "available": ["User"]}
        )
        ```
    """

    pass


class OperationError(RuleknobsError):
    """Raised when an operation cannot be carried out.

    Common scenarios include registering the same key twice and blocking on an
    asynchronous rule from inside a running event loop when that is disabled.

    Example:
        ```python
        raise OperationError(
            "Item 'User' already registered in validators",
            context={"key": "User", "registry": "validators"}
        )
        ```
    """

    pass


__all__ = [
    "RuleknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
]
