"""Validation result type with ordered, per-property error lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ruleknobs_common import ValidationError


@dataclass
class ValidationResult:
    """Aggregated outcome of running a validator against one instance.

    Errors are keyed by property name. Properties keep the order in which
    they first reported an error, and each property's messages keep the order
    in which its checks failed. Nothing is deduplicated.
    """

    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True when no property has a recorded message."""
        return not self.errors

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.is_valid

    def add_error(self, property_name: str, message: str) -> ValidationResult:
        """Append a message to a property's error list (fluent API).

        Args:
            property_name: Name of the failing property
            message: Error message to record

        Returns:
            Self for chaining
        """
        self.errors.setdefault(property_name, []).append(message)
        return self

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Append every error of ``other`` after this result's own errors.

        Args:
            other: Another ValidationResult to fold in

        Returns:
            Self for chaining
        """
        for property_name, messages in other.errors.items():
            for message in messages:
                self.add_error(property_name, message)
        return self

    def to_dict(self) -> dict[str, list[str]]:
        """Plain property -> messages mapping for serialization.

        Keys are not transformed and order is preserved. The lists are copies.
        """
        return {name: list(messages) for name, messages in self.errors.items()}

    def raise_for_errors(self) -> None:
        """Raise ValidationError if this result is not valid.

        Raises:
            ValidationError: With the errors under ``context["errors"]``
        """
        if self.errors:
            failing = ", ".join(self.errors)
            raise ValidationError(
                f"Validation failed for: {failing}",
                context={"errors": self.to_dict()},
            )
