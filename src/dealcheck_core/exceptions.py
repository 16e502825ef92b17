"""Errors raised by dealcheck-core outside the numeric lease engine.

``analyze()`` never raises for a LeaseInput that passed validation. The
compliance checklist does: answers keyed by an unknown question id, or
answers other than yes/no, raise ValidationError.

Example:
    try:
        report = check_dealer_compliance(analysis, answers)
    except ValidationError as e:
        ask_again(e.field)
"""

from typing import Any, Optional


class DealCheckError(Exception):
    """Base class for dealcheck-core errors.

    Attributes:
        message: What went wrong, suitable for showing to a consumer.
        details: Extra context, e.g. the offending field and value.
        recoverable: True when the caller can fix its input and retry.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(DealCheckError):
    """A checklist answer that cannot be interpreted.

    ``field``, ``value`` and ``constraint`` are also copied into ``details``
    so the error serializes in one piece.

    Example:
        >>> evaluate_checklist({"odometer_issue": "maybe"})
        Traceback (most recent call last):
        ...
        ValidationError: Invalid answer for compliance question 'odometer_issue'
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


__all__ = [
    "DealCheckError",
    "ValidationError",
]
