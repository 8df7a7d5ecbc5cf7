"""Exceptions for activity surfaces and their hosts.

Built on the common exception framework from dataknobs_common, so every
error carries an optional ``context`` dictionary that hosts can log or report
without parsing messages.

Example:
    ```python
    from dataknobs_activity.exceptions import ValidationError

    try:
        surface.mount()
    except ValidationError as e:
        logger.error("Bad attributes: %s", e)
        for violation in e.violations:
            logger.error("  %s", violation)
    ```
"""

from dataknobs_common.exceptions import (
    ConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
    ValidationError as BaseValidationError,
)

# Root of everything this package raises
ActivityError = DataknobsError


class ValidationError(BaseValidationError):
    """Raised when a model, attempt state or attribute fails its shape check.

    The ``violations`` context entry lists each failed expectation as
    ``"<path>: <message>"``.

    Example:
        ```python
        raise ValidationError(
            "Invalid model attribute",
            context={"violations": ["authoring.parts: Input should be a valid list"]}
        )
        ```
    """

    @property
    def violations(self) -> list[str]:
        """The individual shape expectations that were violated."""
        return list(self.context.get("violations", []))


class RegistrationError(OperationError):
    """Raised when a key is registered a second time.

    Registrations are set once per key and read many times.
    """

    pass


class ContinuationError(OperationError):
    """Raised when a continuation is invoked more than once."""

    pass


__all__ = [
    "ActivityError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "RegistrationError",
    "ContinuationError",
]
